"""Initiative tracking: turn order, rounds and conditions."""

from . import engine
from .conditions import ConditionDefinition, ConditionLibrary
from .entry import AppliedCondition, InitiativeEntry
from .formatter import FormatterOptions, to_portal_text
from .health import HealthState, health_state, name_struck
from .state import InitiativeTrackerState

__all__ = [
    "engine", "ConditionDefinition", "ConditionLibrary",
    "AppliedCondition", "InitiativeEntry",
    "FormatterOptions", "to_portal_text", "InitiativeTrackerState",
    "HealthState", "health_state", "name_struck",
]
