"""Health indicator derived from hit points and the Bloodied/Dead conditions."""

from enum import Enum

from .conditions import BLOODIED_ID, DEAD_ID
from .entry import InitiativeEntry


class HealthState(Enum):
    """How hurt a combatant looks on the player display."""

    NONE = "none"
    HEALTHY = "healthy"
    INJURED = "injured"
    BLOODIED = "bloodied"
    DEAD = "dead"


def _is_down(entry: InitiativeEntry) -> bool:
    if entry.find_condition(DEAD_ID) is not None:
        return True
    return entry.current_hp is not None and entry.current_hp <= 0


def health_state(entry: InitiativeEntry) -> HealthState:
    """Classify an entry's health.

    The Dead condition or zero hit points wins, then the Bloodied condition.
    Without a positive max HP there is nothing to compare against. Otherwise
    full HP (or no current HP) is healthy and half or less is bloodied.

    Args:
        entry: Combatant to classify

    Returns:
        The HealthState for the entry

    Raises:
        ValueError: If entry is None
    """
    if entry is None:
        raise ValueError("entry is required")

    if _is_down(entry):
        return HealthState.DEAD
    if entry.find_condition(BLOODIED_ID) is not None:
        return HealthState.BLOODIED

    max_hp, current = entry.max_hp, entry.current_hp
    if max_hp is None or max_hp <= 0:
        return HealthState.NONE
    if current is None or current >= max_hp:
        return HealthState.HEALTHY
    if current * 2 <= max_hp:
        return HealthState.BLOODIED
    return HealthState.INJURED


def name_struck(entry: InitiativeEntry) -> bool:
    """Whether the entry's name should be shown struck through."""
    if entry is None:
        raise ValueError("entry is required")
    return _is_down(entry)
