"""
FieldRegistry: name-keyed collection of the field handles mounted in one form.

Each FormController owns exactly one registry; registries are never shared.
The registry only stores and forwards. Change notification is the
controller's job, so nothing here emits events.

Thread safety: Not thread-safe (all operations expected on one thread).
"""
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from formstate.field_handle import UNSET, FieldHandle, FieldValue
from formstate.snapshot_model import PayloadField

logger = logging.getLogger(__name__)

UpdateEntry = Union[PayloadField, Mapping[str, Any], Tuple[str, Any]]


def _normalize_entry(entry: UpdateEntry) -> Tuple[str, Any]:
    """Accept PayloadField, {'field': ..., 'value': ...} or (field, value)."""
    if isinstance(entry, PayloadField):
        return entry.field, entry.value
    if isinstance(entry, Mapping):
        return entry['field'], entry['value']
    field_name, value = entry
    return field_name, value


class FieldRegistry:
    """Mapping from field name to FieldHandle.

    Registration is last-write-wins: adding a handle under a name that is
    already taken replaces the previous handle. Lookups of unknown names are
    no-ops or return UNSET, never errors.
    """

    def __init__(self):
        self._fields: Dict[str, FieldHandle] = {}

    def add(self, handle: FieldHandle) -> None:
        """Register ``handle`` under ``handle.name``, replacing any previous one."""
        if handle.name in self._fields:
            logger.debug(f"Replacing field handle: {handle.name}")
        self._fields[handle.name] = handle
        logger.debug(f"Registered field: {handle.name}")

    def remove(self, name: str) -> Optional[FieldHandle]:
        """Remove and return the handle for ``name``; None if absent."""
        handle = self._fields.pop(name, None)
        if handle is not None:
            logger.debug(f"Unregistered field: {name}")
        return handle

    def get(self, name: str) -> Optional[FieldHandle]:
        return self._fields.get(name)

    def get_value(self, name: str) -> FieldValue:
        """Current value of ``name``, or UNSET if it is not registered."""
        handle = self._fields.get(name)
        if handle is None:
            return UNSET
        return handle.get_value()

    def update_value(self, name: str, value: FieldValue) -> None:
        handle = self._fields.get(name)
        if handle is not None:
            handle.set_value(value)

    def update_values(self, entries: Iterable[UpdateEntry]) -> None:
        """Apply ``update_value`` for each entry, in order. Unknown names are skipped."""
        for entry in entries:
            self.update_value(*_normalize_entry(entry))

    def names(self) -> List[str]:
        return list(self._fields)

    def handles(self) -> List[FieldHandle]:
        # Copy: handles may unregister themselves while being iterated.
        return list(self._fields.values())

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
