"""
Consumer-facing form context and contextvars-based scoping.

Controls rarely hold a reference to their FormController. They ask for "the
form I am inside of" instead. ``form_scope()`` makes a controller current for
a block of code, and ``use_form()`` returns that controller's FormContext, or
NULL_FORM_CONTEXT when called outside any form.

Key components:
- FormContext: frozen view of controller state plus bound operations
- NULL_FORM_CONTEXT: inert variant with in_form=False and no-op mutators
- current_form: ContextVar holding the innermost active controller
- form_scope(): context manager that pushes a controller for a block
"""

import contextvars
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Mapping, Optional

from formstate.snapshot_model import ChangeEvent, ChangeReason

if TYPE_CHECKING:
    from formstate.form_controller import FormController

logger = logging.getLogger(__name__)

# Innermost active controller; None outside any form_scope()
current_form: contextvars.ContextVar[Optional['FormController']] = contextvars.ContextVar(
    'current_form', default=None
)


@dataclass(frozen=True)
class FormContext:
    """What a dependent control sees of the form it lives in.

    State fields are captured when the context is built; operations are bound
    to the live controller, so calling them always acts on current state.
    """
    in_form: bool
    initial_values: Mapping[str, Any]
    last_update: ChangeEvent
    valid: bool
    submitted: bool
    submitting: bool
    add_field: Callable[..., None]
    remove_field: Callable[[str], None]
    get_values: Callable[[], Dict[str, Any]]
    get_value: Callable[[str], Any]
    update_value: Callable[[str, Any], None]
    update_values: Callable[..., None]
    notify_value_change: Callable[[str], None]
    submit: Callable[[], None]
    clear: Callable[[], None]
    get_errors: Callable[[], Dict[str, str]]
    set_error: Callable[[str, str], None]


def _noop(*args, **kwargs) -> None:
    return None


def _empty_mapping() -> Dict[str, Any]:
    return {}


def _empty_value(name: str) -> str:
    return ''


NULL_FORM_CONTEXT = FormContext(
    in_form=False,
    initial_values=MappingProxyType({}),
    last_update=ChangeEvent(when=0, reason=ChangeReason.CREATE),
    valid=True,
    submitted=False,
    submitting=False,
    add_field=_noop,
    remove_field=_noop,
    get_values=_empty_mapping,
    get_value=_empty_value,
    update_value=_noop,
    update_values=_noop,
    notify_value_change=_noop,
    submit=_noop,
    clear=_noop,
    get_errors=_empty_mapping,
    set_error=_noop,
)


@contextmanager
def form_scope(controller: 'FormController') -> Iterator['FormController']:
    """Make ``controller`` the current form for the enclosed block.

    Scopes nest; leaving a block restores whichever controller was current
    before it.

    Usage:
        with form_scope(controller):
            field.bind(use_form())
    """
    token = current_form.set(controller)
    logger.debug(f"Entered form scope: {controller!r}")
    try:
        yield controller
    finally:
        current_form.reset(token)
        logger.debug(f"Exited form scope: {controller!r}")


def get_current_form() -> Optional['FormController']:
    """Innermost active controller, or None outside any form_scope()."""
    return current_form.get()


def use_form() -> FormContext:
    """Context of the current form, or NULL_FORM_CONTEXT outside any form."""
    controller = current_form.get()
    if controller is None:
        return NULL_FORM_CONTEXT
    return controller.get_context()
