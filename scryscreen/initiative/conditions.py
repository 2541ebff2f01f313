"""Condition definitions that applied conditions refer to by id."""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any

from .entry import coerce_uuid

logger = logging.getLogger(__name__)


def _builtin_id(n: int) -> uuid.UUID:
    # Stable ids so saved encounters and color overrides stay valid
    return uuid.UUID(f"d0a70a1b-4d49-4cc8-8f4b-1e1c2a7abf{n:02x}")


BLINDED_ID = _builtin_id(0x01)
BLOODIED_ID = _builtin_id(0x02)
DEAD_ID = _builtin_id(0x04)


@dataclass(frozen=True)
class ConditionDefinition:
    """A named, colored status effect."""

    id: uuid.UUID
    name: str
    color_hex: str
    is_built_in: bool = False
    is_manual_only: bool = False  # Never carries a round timer

    @property
    def is_custom(self) -> bool:
        return not self.is_built_in

    @property
    def display_name(self) -> str:
        return self.name if self.is_built_in else f"*{self.name}"

    def validate(self) -> "ConditionDefinition":
        """Check required fields.

        Raises:
            ValueError: If the name or color is blank
        """
        if not self.name or not self.name.strip():
            raise ValueError("Condition name cannot be blank")
        if not self.color_hex or not self.color_hex.strip():
            raise ValueError("Condition color cannot be blank")
        return self


# (id suffix, name, default color, manual only)
_BUILT_IN_TABLE: list[tuple[int, str, str, bool]] = [
    (0x01, "Blinded", "#FFB0B0B0", False),
    (0x02, "Bloodied", "#FFFFA500", True),
    (0x03, "Charmed", "#FFFF4FD8", False),
    (0x04, "Dead", "#FF888888", True),
    (0x05, "Deafened", "#FF8FB3FF", False),
    (0x06, "Exhaustion 1", "#FFD4AF37", False),
    (0x07, "Exhaustion 2", "#FFD4AF37", False),
    (0x08, "Exhaustion 3", "#FFD4AF37", False),
    (0x09, "Exhaustion 4", "#FFD4AF37", False),
    (0x0A, "Exhaustion 5", "#FFD4AF37", False),
    (0x0B, "Exhaustion 6", "#FFD4AF37", False),
    (0x0C, "Frightened", "#FFB388FF", False),
    (0x0D, "Grappled", "#FF6EE7B7", False),
    (0x0E, "Incapacitated", "#FFFFC857", False),
    (0x0F, "Invisible", "#FF9BE7FF", False),
    (0x10, "Paralyzed", "#FFFF6B6B", False),
    (0x11, "Petrified", "#FFB5C18E", False),
    (0x12, "Poisoned", "#FF4ADE80", False),
    (0x13, "Prone", "#FF93C5FD", False),
    (0x14, "Restrained", "#FF60A5FA", False),
    (0x15, "Stunned", "#FFF59E0B", False),
    (0x16, "Unconscious", "#FF9CA3AF", False),
]


def default_built_ins() -> list[ConditionDefinition]:
    """The built-in conditions with their default colors."""
    return [
        ConditionDefinition(_builtin_id(n), name, color, is_built_in=True, is_manual_only=manual)
        for n, name, color, manual in _BUILT_IN_TABLE
    ]


class ConditionLibrary:
    """Registry of built-in and user-defined conditions."""

    def __init__(self):
        """Initialize with the default built-ins and no custom conditions."""
        self._built_ins: dict[uuid.UUID, ConditionDefinition] = {
            d.id: d for d in default_built_ins()
        }
        self._custom: dict[uuid.UUID, ConditionDefinition] = {}

    def get(self, condition_id: uuid.UUID) -> ConditionDefinition | None:
        """Look up a definition by id.

        Args:
            condition_id: Condition id

        Returns:
            The definition, or None if unknown
        """
        return self._built_ins.get(condition_id) or self._custom.get(condition_id)

    def __contains__(self, condition_id: object) -> bool:
        return condition_id in self._built_ins or condition_id in self._custom

    def all_alphabetical(self) -> list[ConditionDefinition]:
        """All definitions ordered by name (case-insensitive), then id."""
        definitions = list(self._built_ins.values()) + list(self._custom.values())
        return sorted(definitions, key=lambda d: (d.name.upper(), d.id))

    def set_color(self, condition_id: uuid.UUID, color_hex: str) -> None:
        """Recolor any definition; blank colors and unknown ids are ignored."""
        color = (color_hex or "").strip()
        if not color:
            return

        if condition_id in self._built_ins:
            self._built_ins[condition_id] = replace(self._built_ins[condition_id], color_hex=color)
        elif condition_id in self._custom:
            self._custom[condition_id] = replace(self._custom[condition_id], color_hex=color)

    def add_custom(self, name: str, color_hex: str) -> ConditionDefinition:
        """Create a custom condition.

        Args:
            name: Display name
            color_hex: Color such as "#FF3B82F6"

        Returns:
            The new definition

        Raises:
            ValueError: If name or color is blank
        """
        definition = ConditionDefinition(
            id=uuid.uuid4(),
            name=(name or "").strip(),
            color_hex=(color_hex or "").strip(),
        ).validate()
        self._custom[definition.id] = definition
        return definition

    def update_custom(self, condition_id: uuid.UUID, name: str, color_hex: str) -> bool:
        """Rename/recolor a custom condition.

        Returns:
            True if updated, False for unknown ids, built-ins or blank values
        """
        existing = self._custom.get(condition_id)
        n = (name or "").strip()
        c = (color_hex or "").strip()
        if existing is None or not n or not c:
            return False

        self._custom[condition_id] = replace(existing, name=n, color_hex=c)
        return True

    def delete_custom(self, condition_id: uuid.UUID) -> bool:
        """Delete a custom condition.

        Callers should also purge it from tracker entries
        (see ``engine.purge_condition``).
        """
        return self._custom.pop(condition_id, None) is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize color overrides and custom conditions."""
        defaults = {d.id: d for d in default_built_ins()}
        overrides = [
            {"id": str(d.id), "color_hex": d.color_hex}
            for d in self._built_ins.values()
            if d.color_hex.casefold() != defaults[d.id].color_hex.casefold()
        ]
        custom = [
            {"id": str(d.id), "name": d.name, "color_hex": d.color_hex}
            for d in sorted(self._custom.values(), key=lambda d: (d.name.upper(), d.id))
        ]
        return {
            "schema_version": 1,
            "built_in_color_overrides": overrides,
            "custom_conditions": custom,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ConditionLibrary":
        """Rebuild a library, skipping unusable entries."""
        library = cls()
        data = data or {}

        for override in data.get("built_in_color_overrides") or []:
            if not isinstance(override, dict):
                continue
            condition_id = coerce_uuid(override.get("id"))
            if condition_id in library._built_ins:
                library.set_color(condition_id, str(override.get("color_hex") or ""))

        for raw in data.get("custom_conditions") or []:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed custom condition record: {raw!r}")
                continue
            name = str(raw.get("name") or "").strip()
            color = str(raw.get("color_hex") or "").strip()
            if not name or not color:
                logger.warning(f"Dropping custom condition with blank name or color: {raw!r}")
                continue

            condition_id = coerce_uuid(raw.get("id"))
            if condition_id is None or condition_id in library:
                logger.warning(f"Reassigning id for custom condition '{name}'")
                condition_id = uuid.uuid4()

            library._custom[condition_id] = ConditionDefinition(condition_id, name, color)

        return library
