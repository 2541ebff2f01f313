"""Immutable turn-order state for the initiative tracker."""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from .entry import InitiativeEntry, coerce_int, coerce_uuid


@dataclass(frozen=True)
class InitiativeTrackerState:
    """Snapshot of an encounter's turn order.

    ``entries`` order is turn order once sorted, insertion order otherwise.
    ``active_id`` is either None or the id of exactly one entry.
    """

    entries: tuple[InitiativeEntry, ...] = field(default_factory=tuple)
    round: int = 1
    active_id: uuid.UUID | None = None

    EMPTY: ClassVar["InitiativeTrackerState"]

    def active_index(self) -> int:
        """Position of the active entry, or -1 if none resolves."""
        if self.active_id is None:
            return -1
        for i, entry in enumerate(self.entries):
            if entry.id == self.active_id:
                return i
        return -1

    @property
    def active_entry(self) -> InitiativeEntry | None:
        index = self.active_index()
        return self.entries[index] if index >= 0 else None

    def find(self, entry_id: uuid.UUID) -> InitiativeEntry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for storage."""
        return {
            "entries": [e.to_dict() for e in self.entries],
            "round": self.round,
            "active_id": str(self.active_id) if self.active_id else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "InitiativeTrackerState":
        """Deserialize from dict, repairing whatever does not hold the invariants."""
        from .engine import normalize_state

        data = data or {}
        entries: list[InitiativeEntry] = []
        seen: set[uuid.UUID] = set()
        for raw in data.get("entries") or []:
            if not isinstance(raw, dict):
                continue
            entry = InitiativeEntry.from_dict(raw)
            if entry.id in seen:
                entry = replace(entry, id=uuid.uuid4())
            seen.add(entry.id)
            entries.append(entry)

        state = cls(
            entries=tuple(entries),
            round=coerce_int(data.get("round"), 1),
            active_id=coerce_uuid(data.get("active_id")),
        )
        return normalize_state(state)


InitiativeTrackerState.EMPTY = InitiativeTrackerState()
