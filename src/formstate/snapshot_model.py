"""
Value types for form state: change events, snapshots and callback payloads.

Design Philosophy: Correct by Construction
- Immutable records (frozen dataclasses), replaced rather than mutated
- Snapshots are computed on demand and never cached by the controller
- Direct attribute access, ``to_dict()`` for anything a host wants to log or ship
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
import time


class ChangeReason(Enum):
    """Why the form's last_update changed."""
    CREATE = 'create'
    ADD_FIELD = 'addField'
    REMOVE_FIELD = 'removeField'
    CHANGE_VALUE = 'changeValue'
    RESET = 'reset'
    SET_ERROR = 'setError'


def check_is_valid(errors: Mapping[str, str]) -> bool:
    """A form is valid iff every error message is empty."""
    return not any(errors.values())


@dataclass(frozen=True)
class ChangeEvent:
    """The most recent mutation of a form. Only the latest one is retained."""
    when: float
    reason: ChangeReason
    field_name: Optional[str] = None

    @classmethod
    def create(
        cls,
        reason: ChangeReason,
        field_name: Optional[str] = None,
        previous: Optional['ChangeEvent'] = None,
    ) -> 'ChangeEvent':
        """Create an event stamped now, never earlier than ``previous``."""
        when = time.time()
        if previous is not None and when < previous.when:
            when = previous.when
        return cls(when=when, reason=reason, field_name=field_name)

    def to_dict(self) -> Dict[str, Any]:
        data = {'when': self.when, 'reason': self.reason.value}
        if self.field_name is not None:
            data['field_name'] = self.field_name
        return data


@dataclass(frozen=True)
class FormSnapshot:
    """Values and errors of every registered field at one moment."""
    values: Dict[str, Any]
    errors: Dict[str, str]

    @property
    def valid(self) -> bool:
        return check_is_valid(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {'values': dict(self.values), 'errors': dict(self.errors), 'valid': self.valid}


@dataclass(frozen=True)
class ControllerState:
    """Lifecycle and validity flags of a FormController.

    Replaced as a whole on every mutating operation.
    """
    submitting: bool
    submitted: bool
    valid: bool
    last_update: ChangeEvent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'submitting': self.submitting,
            'submitted': self.submitted,
            'valid': self.valid,
            'last_update': self.last_update.to_dict(),
        }


@dataclass(frozen=True)
class PayloadField:
    """One entry of a bulk value update."""
    field: str
    value: Any


@dataclass(frozen=True)
class ChangePayload:
    """Argument of the ``on_change`` callback."""
    valid: bool
    errors: Dict[str, str]
    values: Dict[str, Any]
    event: ChangeEvent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'valid': self.valid,
            'errors': dict(self.errors),
            'values': dict(self.values),
            'event': self.event.to_dict(),
        }


@dataclass(frozen=True)
class SubmitPayload:
    """Argument of the ``on_submit`` callback.

    ``on_finish(should_clear=False)`` must be called exactly once when the
    submission completes; passing True clears the form.
    """
    values: Dict[str, Any]
    errors: Dict[str, str]
    valid: bool
    set_error: Callable[[str, str], None]
    on_finish: Callable[..., None]


@dataclass(frozen=True)
class InitialState:
    """Seed state for a new controller."""
    values: Optional[Dict[str, Any]] = None
    valid: bool = True
