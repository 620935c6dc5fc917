"""
Construction-time configuration for FormController.

``initial_state.values`` takes precedence over ``initial_values``;
``initial_state.valid`` seeds the validity flag before any snapshot exists.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from formstate.snapshot_model import ChangePayload, InitialState, SubmitPayload

# When True, every emitted change event is logged at INFO level.
DEBUG_EVENTS = False


@dataclass(frozen=True)
class FormConfig:
    """Callbacks and seed values for one form."""
    on_submit: Optional[Callable[[SubmitPayload], Any]] = None
    on_change: Optional[Callable[[ChangePayload], Any]] = None
    initial_values: Optional[Dict[str, Any]] = None
    initial_state: Optional[InitialState] = None

    def resolve_initial_values(self) -> Dict[str, Any]:
        if self.initial_state is not None and self.initial_state.values is not None:
            return self.initial_state.values
        if self.initial_values is not None:
            return self.initial_values
        return {}

    def resolve_initial_valid(self) -> bool:
        if self.initial_state is None:
            return True
        return self.initial_state.valid
