"""Initiative tracker engine: pure transitions over InitiativeTrackerState.

Every function takes a state and returns a new one; the input is never
modified. Operations that reference an unknown id return the input unchanged.
"""

import logging
import uuid
from dataclasses import replace

from .entry import AppliedCondition, InitiativeEntry
from .state import InitiativeTrackerState

logger = logging.getLogger(__name__)


def _require_state(state: InitiativeTrackerState | None) -> None:
    if state is None:
        raise ValueError("state is required")


def _require_entry(entry: InitiativeEntry | None) -> None:
    if entry is None:
        raise ValueError("entry is required")


def add(state: InitiativeTrackerState, entry: InitiativeEntry) -> InitiativeTrackerState:
    """Append an entry to the end of the turn order.

    Args:
        state: Current state
        entry: Entry to add; its name is normalized

    Returns:
        New state; the entry becomes active if nothing was active
    """
    _require_state(state)
    _require_entry(entry)

    active_id = state.active_id if state.active_id is not None else entry.id
    logger.debug(f"Adding combatant {entry.id}")
    return replace(state, entries=state.entries + (entry.normalized(),), active_id=active_id)


def update(state: InitiativeTrackerState, entry: InitiativeEntry) -> InitiativeTrackerState:
    """Replace the entry sharing ``entry.id``; no-op if there is none."""
    _require_state(state)
    _require_entry(entry)

    for i, existing in enumerate(state.entries):
        if existing.id == entry.id:
            entries = state.entries[:i] + (entry.normalized(),) + state.entries[i + 1:]
            return replace(state, entries=entries)

    return state


def remove(state: InitiativeTrackerState, entry_id: uuid.UUID) -> InitiativeTrackerState:
    """Remove an entry by id.

    If the removed entry was active, the entry now occupying its position
    becomes active (or the new last entry, if it was last).
    """
    _require_state(state)

    removed_index = next(
        (i for i, e in enumerate(state.entries) if e.id == entry_id),
        -1,
    )
    if removed_index < 0:
        return state

    entries = state.entries[:removed_index] + state.entries[removed_index + 1:]
    if not entries:
        return replace(state, entries=(), active_id=None)

    active_id = state.active_id
    if active_id == entry_id:
        active_id = entries[min(removed_index, len(entries) - 1)].id

    logger.debug(f"Removed combatant {entry_id}")
    return replace(state, entries=entries, active_id=active_id)


def clear(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """Return the canonical empty state."""
    _require_state(state)
    return InitiativeTrackerState.EMPTY


def set_round(state: InitiativeTrackerState, round_number: int) -> InitiativeTrackerState:
    """Set the round, clamping anything below 1 up to 1."""
    _require_state(state)
    return replace(state, round=max(1, round_number))


def set_active(state: InitiativeTrackerState, entry_id: uuid.UUID) -> InitiativeTrackerState:
    """Make an entry active if it exists."""
    _require_state(state)

    if state.find(entry_id) is None:
        return state
    return replace(state, active_id=entry_id)


def sort(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """Sort into turn order.

    Order: initiative desc, mod desc, name (compared upper-cased) asc, id asc,
    then original position. The active entry is kept when it still resolves,
    otherwise the first entry becomes active.
    """
    _require_state(state)

    if not state.entries:
        return state if state.active_id is None else replace(state, active_id=None)

    indexed = [(entry.normalized(), i) for i, entry in enumerate(state.entries)]
    indexed.sort(
        key=lambda pair: (
            -pair[0].initiative,
            -pair[0].mod,
            pair[0].name.upper(),
            pair[0].id,
            pair[1],
        )
    )
    entries = tuple(entry for entry, _ in indexed)

    active_id = state.active_id
    if active_id is None or all(e.id != active_id for e in entries):
        active_id = entries[0].id

    return replace(state, entries=entries, active_id=active_id)


def next_turn(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """Advance to the next combatant, starting a new round after the last."""
    _require_state(state)

    if not state.entries:
        return state

    index = state.active_index()
    if index < 0:
        return replace(state, active_id=state.entries[0].id)

    following = index + 1
    if following >= len(state.entries):
        logger.debug(f"Round {state.round} complete")
        return replace(state, active_id=state.entries[0].id, round=state.round + 1)

    return replace(state, active_id=state.entries[following].id)


def previous_turn(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """Step back one combatant, undoing a round when wrapping past the first."""
    _require_state(state)

    if not state.entries:
        return state

    index = state.active_index()
    if index < 0:
        return replace(state, active_id=state.entries[0].id)

    preceding = index - 1
    if preceding < 0:
        return replace(
            state,
            active_id=state.entries[-1].id,
            round=max(1, state.round - 1),
        )

    return replace(state, active_id=state.entries[preceding].id)


def normalize_state(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """Repair an externally built state so that it satisfies the invariants.

    Names are normalized, the round is floored at 1 and a missing or dangling
    active id is re-resolved to the first entry (or cleared when empty).
    """
    _require_state(state)

    entries = tuple(e.normalized() for e in (state.entries or ()))
    round_number = max(1, state.round)

    active_id = state.active_id
    if not entries:
        active_id = None
    elif active_id is None or all(e.id != active_id for e in entries):
        active_id = entries[0].id

    normalized = replace(state, entries=entries, round=round_number, active_id=active_id)
    return state if normalized == state else normalized


def _replace_entry(
    state: InitiativeTrackerState,
    entry_id: uuid.UUID,
    conditions: tuple[AppliedCondition, ...],
) -> InitiativeTrackerState:
    entries = tuple(
        replace(e, conditions=conditions) if e.id == entry_id else e
        for e in state.entries
    )
    return replace(state, entries=entries)


def apply_condition(
    state: InitiativeTrackerState,
    entry_id: uuid.UUID,
    condition: AppliedCondition,
) -> InitiativeTrackerState:
    """Attach a condition to an entry, replacing any instance with the same id."""
    _require_state(state)
    if condition is None:
        raise ValueError("condition is required")

    entry = state.find(entry_id)
    if entry is None:
        return state

    condition = condition.normalize()
    kept = tuple(c for c in entry.conditions if c.condition_id != condition.condition_id)
    return _replace_entry(state, entry_id, kept + (condition,))


def remove_condition(
    state: InitiativeTrackerState,
    entry_id: uuid.UUID,
    condition_id: uuid.UUID,
) -> InitiativeTrackerState:
    """Detach a condition from an entry."""
    _require_state(state)

    entry = state.find(entry_id)
    if entry is None or entry.find_condition(condition_id) is None:
        return state

    kept = tuple(c for c in entry.conditions if c.condition_id != condition_id)
    return _replace_entry(state, entry_id, kept)


def purge_condition(state: InitiativeTrackerState, condition_id: uuid.UUID) -> InitiativeTrackerState:
    """Detach a condition from every entry."""
    _require_state(state)

    if all(e.find_condition(condition_id) is None for e in state.entries):
        return state

    entries = tuple(
        replace(e, conditions=tuple(c for c in e.conditions if c.condition_id != condition_id))
        for e in state.entries
    )
    return replace(state, entries=entries)


def tick_conditions(state: InitiativeTrackerState, entry_id: uuid.UUID) -> InitiativeTrackerState:
    """Count down an entry's timed conditions by one round.

    Conditions reaching zero expire. Manual-only conditions are untouched.
    """
    _require_state(state)

    entry = state.find(entry_id)
    if entry is None or not any(c.is_timed for c in entry.conditions):
        return state

    remaining = []
    for condition in entry.conditions:
        if not condition.is_timed:
            remaining.append(condition)
        elif condition.rounds_remaining > 1:
            remaining.append(replace(condition, rounds_remaining=condition.rounds_remaining - 1))
        else:
            logger.debug(f"Condition {condition.condition_id} expired on {entry_id}")

    return _replace_entry(state, entry_id, tuple(remaining))


def advance_turn(state: InitiativeTrackerState) -> InitiativeTrackerState:
    """End the active combatant's turn: tick its conditions, then move on."""
    _require_state(state)

    if state.active_id is not None:
        state = tick_conditions(state, state.active_id)
    return next_turn(state)
