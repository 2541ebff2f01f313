"""Initiative entry and applied condition value types."""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any

UNNAMED = "(Unnamed)"


def coerce_int(value: Any, default: int = 0) -> int:
    """Read an int that may have been stored as text ("12", "", None)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def coerce_optional_int(value: Any) -> int | None:
    """Read an int that may be unknown; blank or unreadable text gives None."""
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_uuid(value: Any) -> uuid.UUID | None:
    """Read a UUID from a UUID or its string form; None when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class AppliedCondition:
    """A condition attached to a combatant, optionally timed in rounds."""

    condition_id: uuid.UUID
    rounds_remaining: int | None = None  # None = manual-only, no timer

    def normalize(self) -> "AppliedCondition":
        """Clamp a timed duration below 1 up to exactly 1."""
        if self.rounds_remaining is not None and self.rounds_remaining < 1:
            return replace(self, rounds_remaining=1)
        return self

    @property
    def is_timed(self) -> bool:
        return self.rounds_remaining is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition_id": str(self.condition_id),
            "rounds_remaining": self.rounds_remaining,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppliedCondition | None":
        """Deserialize; returns None when the condition id is unusable."""
        condition_id = coerce_uuid(data.get("condition_id"))
        if condition_id is None:
            return None
        rounds = data.get("rounds_remaining")
        rounds = None if rounds is None or rounds == "" else coerce_int(rounds, 1)
        return cls(condition_id, rounds).normalize()


@dataclass(frozen=True)
class InitiativeEntry:
    """One combatant in the turn order."""

    id: uuid.UUID
    name: str
    initiative: int = 0
    mod: int = 0
    is_hidden: bool = False
    notes: str | None = None
    conditions: tuple[AppliedCondition, ...] = field(default_factory=tuple)
    max_hp: int | None = None
    current_hp: int | None = None

    @classmethod
    def create(
        cls,
        name: str,
        initiative: int = 0,
        mod: int = 0,
        is_hidden: bool = False,
        notes: str | None = None,
        max_hp: int | None = None,
        current_hp: int | None = None,
    ) -> "InitiativeEntry":
        """Create an entry with a freshly generated id."""
        return cls(
            id=uuid.uuid4(),
            name=name,
            initiative=initiative,
            mod=mod,
            is_hidden=is_hidden,
            notes=notes,
            max_hp=max_hp,
            current_hp=current_hp,
        )

    def normalized(self) -> "InitiativeEntry":
        """Return a copy with a trimmed, non-blank name and clamped conditions."""
        name = (self.name or "").strip() or UNNAMED
        conditions = tuple(c.normalize() for c in self.conditions)
        if name == self.name and conditions == self.conditions:
            return self
        return replace(self, name=name, conditions=conditions)

    def find_condition(self, condition_id: uuid.UUID) -> AppliedCondition | None:
        for condition in self.conditions:
            if condition.condition_id == condition_id:
                return condition
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "initiative": self.initiative,
            "mod": self.mod,
            "is_hidden": self.is_hidden,
            "notes": self.notes,
            "conditions": [c.to_dict() for c in self.conditions],
            "max_hp": self.max_hp,
            "current_hp": self.current_hp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InitiativeEntry":
        """Deserialize, tolerating text-typed numbers and missing keys."""
        conditions = []
        for raw in data.get("conditions") or []:
            if isinstance(raw, dict):
                condition = AppliedCondition.from_dict(raw)
                if condition is not None:
                    conditions.append(condition)

        notes = data.get("notes")
        return cls(
            id=coerce_uuid(data.get("id")) or uuid.uuid4(),
            name=str(data.get("name") or ""),
            initiative=coerce_int(data.get("initiative")),
            mod=coerce_int(data.get("mod")),
            is_hidden=bool(data.get("is_hidden", False)),
            notes=str(notes) if notes is not None else None,
            conditions=tuple(conditions),
            # Older saves used the host app's field names
            max_hp=coerce_optional_int(data.get("max_hp", data.get("MaxHp"))),
            current_hp=coerce_optional_int(data.get("current_hp", data.get("CurrentHp"))),
        ).normalized()
