"""
FormController: owns a FieldRegistry and coordinates the form built on it.

The controller holds no copy of field values. Values and errors are pulled
from every registered handle whenever a snapshot is needed. What it does keep
is a small ControllerState (submitting, submitted, valid, last_update).

Every mutating operation emits exactly one ChangeEvent. Emitting an event
replaces ``last_update`` and then runs the derived-state step synchronously:
1. Recompute the FormSnapshot from all handles
2. Store ``valid`` derived from the snapshot's errors
3. Call the configured ``on_change`` with a ChangePayload
4. Push the fresh FormContext to every connected listener

Events emitted from inside a callback are queued and processed after the
current one, so the derived-state step runs once per event, in order.

A controller starts with a 'create' event. ``mount()`` runs the derived-state
step for it; construction mounts immediately unless ``defer_mount`` is set,
in which case events are held until the host calls ``mount()`` after the
first fields are bound.

Thread safety: Not thread-safe (all operations expected on one thread).
"""
import dataclasses
import logging
from collections import deque
from types import MappingProxyType
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional

import formstate.config as config_module
from formstate.config import FormConfig
from formstate.context import FormContext
from formstate.field_handle import FieldValue, as_field_handle
from formstate.field_registry import FieldRegistry, UpdateEntry
from formstate.snapshot_model import (
    ChangeEvent,
    ChangePayload,
    ChangeReason,
    ControllerState,
    FormSnapshot,
    InitialState,
    SubmitPayload,
)

logger = logging.getLogger(__name__)


class FormController:
    """Coordinates the fields of one form.

    Args:
        config: Callbacks and seed values. Keyword arguments with the same
                names override the corresponding config entries.
        defer_mount: Hold back change events until ``mount()`` is called.

    Usage:
        form = FormController(on_submit=handle_submit)
        name_field.bind(form)
        ...
        form.submit()
    """

    def __init__(
        self,
        config: Optional[FormConfig] = None,
        *,
        on_submit: Optional[Callable[[SubmitPayload], Any]] = None,
        on_change: Optional[Callable[[ChangePayload], Any]] = None,
        initial_values: Optional[Dict[str, Any]] = None,
        initial_state: Optional[InitialState] = None,
        defer_mount: bool = False,
    ):
        overrides = {
            'on_submit': on_submit,
            'on_change': on_change,
            'initial_values': initial_values,
            'initial_state': initial_state,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        self._config = dataclasses.replace(config or FormConfig(), **overrides)

        self._registry = FieldRegistry()
        self._initial_values = MappingProxyType(dict(self._config.resolve_initial_values()))
        self._state = ControllerState(
            submitting=False,
            submitted=False,
            valid=self._config.resolve_initial_valid(),
            last_update=ChangeEvent.create(ChangeReason.CREATE),
        )

        self._listeners: List[Callable[[FormContext], None]] = []
        self._pending: Deque[ChangeEvent] = deque()
        self._dispatching = False
        self._mounted = False
        self._last_stamped = self._state.last_update

        logger.debug(f"Created FormController: valid={self._state.valid}")
        if not defer_mount:
            self.mount()

    def __repr__(self) -> str:
        return f"FormController(fields={self._registry.names()}, valid={self._state.valid})"

    # === State ===

    @property
    def config(self) -> FormConfig:
        return self._config

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def initial_values(self) -> Mapping[str, Any]:
        return self._initial_values

    @property
    def valid(self) -> bool:
        return self._state.valid

    @property
    def submitted(self) -> bool:
        return self._state.submitted

    @property
    def submitting(self) -> bool:
        return self._state.submitting

    @property
    def last_update(self) -> ChangeEvent:
        return self._state.last_update

    @property
    def mounted(self) -> bool:
        return self._mounted

    # === Lifecycle ===

    def mount(self) -> 'FormController':
        """Run the derived-state step for the 'create' event.

        Until then ``valid`` keeps its ``initial_state`` seed and events are
        held back. Held events are processed right after 'create', in the
        order they were emitted, so fields bound before mounting are already
        part of the 'create' snapshot. Calling it again does nothing.
        """
        if self._mounted:
            logger.debug("FormController already mounted")
            return self
        self._mounted = True
        self._pending.appendleft(self._state.last_update)
        logger.debug(f"Mounting FormController with {len(self._pending) - 1} held event(s)")
        self._dispatch()
        return self

    # === Registration ===

    def add_field(self, field: Any) -> None:
        """Register a field handle (or any object satisfying the handle contract).

        A handle with an already-registered name silently replaces the old one.
        """
        handle = as_field_handle(field)
        self._registry.add(handle)
        self._emit(ChangeReason.ADD_FIELD, handle.name)

    def remove_field(self, name: str) -> None:
        """Unregister ``name``. Unknown names are not an error, but still emit."""
        self._registry.remove(name)
        self._emit(ChangeReason.REMOVE_FIELD, name)

    # === Reads ===

    def get_values(self) -> Dict[str, Any]:
        return {handle.name: handle.get_value() for handle in self._registry.handles()}

    def get_errors(self) -> Dict[str, str]:
        return {handle.name: handle.error() for handle in self._registry.handles()}

    def get_snapshot(self) -> FormSnapshot:
        """Values and errors of every registered field, computed now."""
        return FormSnapshot(values=self.get_values(), errors=self.get_errors())

    def get_value(self, name: str) -> FieldValue:
        """Value of ``name``, or UNSET if it is not registered."""
        return self._registry.get_value(name)

    # === Writes ===

    def update_value(self, name: str, value: FieldValue) -> None:
        """Forward ``value`` to the field. Emits nothing.

        The field is expected to call ``notify_value_change`` itself once its
        own state has been updated.
        """
        self._registry.update_value(name, value)

    def update_values(self, entries: Iterable[UpdateEntry]) -> None:
        """Bulk ``update_value``, applied in order. Emits nothing."""
        self._registry.update_values(entries)

    def notify_value_change(self, name: str) -> None:
        """Called by a field whenever its value changed outside the controller."""
        self._emit(ChangeReason.CHANGE_VALUE, name)

    def set_error(self, name: str, message: str) -> None:
        """Imperatively mark ``name`` invalid. Does not re-run ``validate``.

        Whether a later value change discards this message is up to the field.
        """
        handle = self._registry.get(name)
        if handle is not None:
            handle.set_error(message)
        self._emit(ChangeReason.SET_ERROR, name)

    def clear(self) -> None:
        """Clear every field, then emit a single 'reset' event.

        The submission flags are left untouched.
        """
        for handle in self._registry.handles():
            handle.clear()
        self._emit(ChangeReason.RESET)

    # === Submission ===

    def submit(self) -> None:
        """Run one submission.

        Sets ``submitting`` and ``submitted``, hands the current snapshot to
        ``on_submit`` and clears ``submitting`` again as soon as the callback
        returns. ``submitting`` therefore covers only the synchronous call,
        not any work the callback defers until it calls ``on_finish``.
        """
        self._replace_state(submitting=True, submitted=True)
        logger.debug("Submitting form")
        try:
            on_submit = self._config.on_submit
            if on_submit is not None:
                snapshot = self.get_snapshot()
                on_submit(SubmitPayload(
                    values=snapshot.values,
                    errors=snapshot.errors,
                    valid=snapshot.valid,
                    set_error=self.set_error,
                    on_finish=self._make_on_finish(),
                ))
        finally:
            self._replace_state(submitting=False)
        self._notify_listeners()

    def _make_on_finish(self) -> Callable[..., None]:
        """Build the completion handle for one submission."""
        finished = False

        def on_finish(should_clear: bool = False) -> None:
            nonlocal finished
            if finished:
                logger.warning("on_finish called more than once for the same submission; ignoring")
                return
            finished = True
            logger.debug(f"Submission finished: should_clear={should_clear}")
            if should_clear:
                self.clear()

        return on_finish

    # === Change events ===

    def _replace_state(self, **changes: Any) -> None:
        self._state = dataclasses.replace(self._state, **changes)

    def _emit(self, reason: ChangeReason, field_name: Optional[str] = None) -> None:
        """Record a change event and run the derived-state step for it."""
        event = ChangeEvent.create(reason, field_name, previous=self._last_stamped)
        self._last_stamped = event
        self._pending.append(event)

        if self._dispatching or not self._mounted:
            logger.debug(f"Queued {reason.value} event")
            return
        self._dispatch()

    def _dispatch(self) -> None:
        """Apply every pending event in order.

        A failing ``on_change`` does not drop the events queued behind it; the
        queue is drained first and the first failure is re-raised afterwards.
        """
        self._dispatching = True
        error = None
        try:
            while self._pending:
                event = self._pending.popleft()
                try:
                    self._apply_event(event)
                except Exception as e:
                    if error is None:
                        error = e
                    else:
                        logger.warning(f"on_change failed for {event.reason.value} event: {e}")
        finally:
            self._dispatching = False
        if error is not None:
            raise error

    def _apply_event(self, event: ChangeEvent) -> None:
        if config_module.DEBUG_EVENTS:
            logger.info(f"Form event: {event.reason.value} field={event.field_name}")

        snapshot = self.get_snapshot()
        valid = snapshot.valid
        self._replace_state(last_update=event, valid=valid)

        on_change = self._config.on_change
        if on_change is not None:
            on_change(ChangePayload(
                valid=valid,
                errors=snapshot.errors,
                values=snapshot.values,
                event=event,
            ))

        self._notify_listeners()

    # === Listeners ===

    def connect_listener(self, callback: Callable[[FormContext], None]) -> None:
        """Connect a listener that receives the FormContext after every change."""
        if callback not in self._listeners:
            self._listeners.append(callback)
            logger.debug(f"Connected form listener: {callback}")

    def disconnect_listener(self, callback: Callable[[FormContext], None]) -> None:
        """Disconnect a form listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
            logger.debug(f"Disconnected form listener: {callback}")

    def _notify_listeners(self) -> None:
        """Push the current context to every listener (best-effort)."""
        if not self._listeners:
            return
        context = self.get_context()
        for callback in list(self._listeners):
            try:
                callback(context)
            except Exception as e:
                logger.warning(f"Form listener failed: {e}")

    # === Context ===

    def get_context(self) -> FormContext:
        """Consumer-facing view of this form, bound to this controller."""
        state = self._state
        return FormContext(
            in_form=True,
            initial_values=self._initial_values,
            last_update=state.last_update,
            valid=state.valid,
            submitted=state.submitted,
            submitting=state.submitting,
            add_field=self.add_field,
            remove_field=self.remove_field,
            get_values=self.get_values,
            get_value=self.get_value,
            update_value=self.update_value,
            update_values=self.update_values,
            notify_value_change=self.notify_value_change,
            submit=self.submit,
            clear=self.clear,
            get_errors=self.get_errors,
            set_error=self.set_error,
        )
