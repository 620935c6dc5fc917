"""
ValueField: a plain in-memory field that can bind itself to a form.

Hosts that render their own inputs usually build a FieldHandle around
whatever the input widget stores. ValueField is for everything else: it keeps
the value itself and is handy for headless forms and tests.

Error precedence:
    A message set through ``set_error`` wins over the validator until the
    field's value changes (``set_value``/``change``) or the field is cleared.
    Either of those discards the manual message, and the validator decides
    again.
"""
import logging
from typing import Any, Callable, Optional

from formstate.field_handle import UNSET, FieldHandle

logger = logging.getLogger(__name__)


class ValueField:
    """Field whose value lives on the field object itself.

    Args:
        name: Field name, unique within the form.
        initial: Value restored by ``clear()``. When omitted, the form's
                 ``initial_values`` entry for ``name`` is used on ``bind()``,
                 falling back to None.
        validator: Called with the current value; returns an error message
                   or '' when valid.
    """

    def __init__(
        self,
        name: str,
        initial: Any = UNSET,
        validator: Optional[Callable[[Any], str]] = None,
    ):
        self.name = name
        self._explicit_initial = initial is not UNSET
        self.initial = None if initial is UNSET else initial
        self.value = self.initial
        self.validator = validator
        self.manual_error = ''
        self._form = None

    def __repr__(self) -> str:
        return f"ValueField({self.name!r}, value={self.value!r})"

    # === Handle contract ===

    def get_value(self) -> Any:
        return self.value

    def set_value(self, value: Any) -> None:
        self.value = value
        self.manual_error = ''

    def clear(self) -> None:
        self.value = self.initial
        self.manual_error = ''

    def set_error(self, message: str) -> None:
        self.manual_error = message or ''

    def validate(self) -> str:
        if self.manual_error:
            return self.manual_error
        if self.validator is None:
            return ''
        return self.validator(self.value) or ''

    @property
    def handle(self) -> FieldHandle:
        return FieldHandle(
            name=self.name,
            get_value=self.get_value,
            set_value=self.set_value,
            clear=self.clear,
            set_error=self.set_error,
            validate=self.validate,
        )

    # === Form binding ===

    @property
    def bound(self) -> bool:
        return self._form is not None

    def bind(self, form) -> 'ValueField':
        """Register with ``form`` (a FormController or FormContext).

        Binding to the inert NULL_FORM_CONTEXT is allowed and does nothing.
        """
        if not self._explicit_initial:
            self.initial = form.initial_values.get(self.name)
            self.value = self.initial
        self._form = form
        form.add_field(self.handle)
        return self

    def unbind(self) -> None:
        """Remove this field from its form. Safe to call when unbound."""
        if self._form is None:
            return
        form, self._form = self._form, None
        form.remove_field(self.name)

    def change(self, value: Any) -> None:
        """Set the value as user input would, and tell the form about it."""
        self.set_value(value)
        if self._form is not None:
            self._form.notify_value_change(self.name)
        else:
            logger.debug(f"ValueField '{self.name}' changed while unbound")
