"""
Exceptions raised by formstate.

The coordinator itself never raises for unknown field names or invalid
values; those are handled as no-ops and as error data. These exceptions only
cover misuse at the edges, such as registering an object that does not
satisfy the field handle contract.
"""


class FormStateError(Exception):
    """Base class for formstate errors."""


class FieldHandleError(FormStateError, TypeError):
    """Object cannot be adapted into a FieldHandle."""

    def __init__(self, obj, missing):
        self.obj = obj
        self.missing = tuple(missing)
        super().__init__(
            f"{type(obj).__name__} is not a field handle; missing: {', '.join(self.missing)}"
        )
