"""
FieldHandle: the binding an input control registers with a FormController.

A handle is a bundle of callables supplied by the control that owns the field.
The controller never stores field values itself; every read goes through the
handle at the moment of the call.

Validation is optional. Instead of probing for a ``validate`` attribute at
every call site, a handle built without a validator carries ``NO_VALIDATOR``,
which always reports the field as valid. ``FieldHandle.has_validator`` tells
the two variants apart.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable

from formstate.exceptions import FieldHandleError

logger = logging.getLogger(__name__)

FieldValue = Any
Validator = Callable[[], str]


class _Unset:
    """Sentinel for "no such field" (distinct from None and "")."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'UNSET'

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()


def NO_VALIDATOR() -> str:
    """Validator of a field that has none: always valid."""
    return ''


@dataclass(frozen=True)
class FieldHandle:
    """One input's binding to the form.

    Attributes:
        name: Unique key within the registry.
        get_value: Returns the current value.
        set_value: Replaces the current value.
        clear: Resets the field to its unset/initial state.
        set_error: Imperatively marks the field invalid with a message.
        validate: Returns a non-empty message when invalid, '' otherwise.
    """
    name: str
    get_value: Callable[[], FieldValue]
    set_value: Callable[[FieldValue], None]
    clear: Callable[[], None]
    set_error: Callable[[str], None]
    validate: Validator = NO_VALIDATOR

    @property
    def has_validator(self) -> bool:
        return self.validate is not NO_VALIDATOR

    def error(self) -> str:
        """Run the validator, normalizing falsy results to ''."""
        return self.validate() or ''


# Members every handle must expose; ``validate`` is the only optional one.
_REQUIRED_MEMBERS = ('get_value', 'set_value', 'clear', 'set_error')


def as_field_handle(obj: Any) -> FieldHandle:
    """Adapt a duck-typed field object into a FieldHandle.

    Accepts an existing FieldHandle unchanged. Any other object must expose a
    ``name`` plus the required callables; a callable ``validate`` is used when
    present, otherwise the handle gets ``NO_VALIDATOR``.

    Raises:
        FieldHandleError: If ``name`` or a required callable is missing.
    """
    if isinstance(obj, FieldHandle):
        return obj

    missing = [] if isinstance(getattr(obj, 'name', None), str) else ['name']
    missing += [m for m in _REQUIRED_MEMBERS if not callable(getattr(obj, m, None))]
    if missing:
        raise FieldHandleError(obj, missing)

    validate = getattr(obj, 'validate', None)
    if not callable(validate):
        validate = NO_VALIDATOR

    logger.debug(f"Adapted {type(obj).__name__} into FieldHandle '{obj.name}'")
    return FieldHandle(
        name=obj.name,
        get_value=obj.get_value,
        set_value=obj.set_value,
        clear=obj.clear,
        set_error=obj.set_error,
        validate=validate,
    )
