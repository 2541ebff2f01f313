"""Tests for conditions applied to initiative entries."""

import uuid

import pytest

from scryscreen.initiative import AppliedCondition, InitiativeEntry, InitiativeTrackerState
from scryscreen.initiative import engine
from scryscreen.initiative.conditions import BLINDED_ID, DEAD_ID

POISONED_ID = uuid.UUID("d0a70a1b-4d49-4cc8-8f4b-1e1c2a7abf12")


@pytest.fixture
def tracker():
    """Alice (active) and Bob."""
    alice = InitiativeEntry.create("Alice", 15)
    bob = InitiativeEntry.create("Bob", 10)
    state = InitiativeTrackerState(entries=(alice, bob), active_id=alice.id)
    return state, alice, bob


class TestAppliedCondition:
    """Test AppliedCondition normalization."""

    @pytest.mark.parametrize("rounds,expected", [(0, 1), (-5, 1), (1, 1), (4, 4), (None, None)])
    def test_normalize(self, rounds, expected):
        """Test durations below 1 clamp to 1 and manual ones stay None."""
        assert AppliedCondition(BLINDED_ID, rounds).normalize().rounds_remaining == expected

    def test_is_timed(self):
        """Test timed detection."""
        assert AppliedCondition(BLINDED_ID, 2).is_timed
        assert not AppliedCondition(DEAD_ID).is_timed


class TestApplyAndRemove:
    """Test attaching and detaching conditions."""

    def test_apply(self, tracker):
        """Test applying a timed condition."""
        state, alice, bob = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 3))
        assert state.find(alice.id).conditions == (AppliedCondition(BLINDED_ID, 3),)
        assert state.find(bob.id).conditions == ()

    def test_apply_normalizes(self, tracker):
        """Test applying a zero duration stores one round."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 0))
        assert state.find(alice.id).conditions[0].rounds_remaining == 1

    def test_reapply_replaces(self, tracker):
        """Test re-adding a condition replaces the existing instance."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 3))
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 1))
        assert state.find(alice.id).conditions == (AppliedCondition(BLINDED_ID, 1),)

    def test_apply_unknown_entry_is_noop(self, tracker):
        """Test applying to a missing entry."""
        state = tracker[0]
        assert engine.apply_condition(state, uuid.uuid4(), AppliedCondition(BLINDED_ID)) is state

    def test_apply_requires_condition(self, tracker):
        """Test None is rejected."""
        state, alice, _ = tracker
        with pytest.raises(ValueError):
            engine.apply_condition(state, alice.id, None)

    def test_remove(self, tracker):
        """Test detaching one condition."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 2))
        state = engine.apply_condition(state, alice.id, AppliedCondition(DEAD_ID))
        state = engine.remove_condition(state, alice.id, BLINDED_ID)
        assert state.find(alice.id).conditions == (AppliedCondition(DEAD_ID),)

    def test_remove_missing_is_noop(self, tracker):
        """Test removing a condition that is not present."""
        state, alice, _ = tracker
        assert engine.remove_condition(state, alice.id, BLINDED_ID) is state

    def test_purge(self, tracker):
        """Test purging a condition from every entry."""
        state, alice, bob = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(POISONED_ID, 2))
        state = engine.apply_condition(state, bob.id, AppliedCondition(POISONED_ID))
        state = engine.apply_condition(state, bob.id, AppliedCondition(BLINDED_ID))
        state = engine.purge_condition(state, POISONED_ID)

        assert state.find(alice.id).conditions == ()
        assert state.find(bob.id).conditions == (AppliedCondition(BLINDED_ID),)

    def test_purge_absent_is_noop(self, tracker):
        """Test purging a condition nobody has."""
        state = tracker[0]
        assert engine.purge_condition(state, POISONED_ID) is state


class TestTickDown:
    """Test condition countdown at the end of a turn."""

    def test_tick_decrements_and_expires(self, tracker):
        """Test a two-round condition lasts two ticks."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 2))

        state = engine.tick_conditions(state, alice.id)
        assert state.find(alice.id).conditions[0].rounds_remaining == 1

        state = engine.tick_conditions(state, alice.id)
        assert state.find(alice.id).conditions == ()

    def test_manual_conditions_untouched(self, tracker):
        """Test conditions without a timer never expire."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(DEAD_ID))
        assert engine.tick_conditions(state, alice.id) is state

    def test_advance_turn_ticks_outgoing_combatant(self, tracker):
        """Test advance_turn ticks the active entry then moves on."""
        state, alice, bob = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 2))
        state = engine.apply_condition(state, bob.id, AppliedCondition(BLINDED_ID, 2))

        state = engine.advance_turn(state)

        assert state.active_id == bob.id
        assert state.find(alice.id).conditions[0].rounds_remaining == 1
        assert state.find(bob.id).conditions[0].rounds_remaining == 2

    def test_advance_turn_full_round(self, tracker):
        """Test a one-round condition expires after its owner's turn."""
        state, alice, bob = tracker
        state = engine.apply_condition(state, bob.id, AppliedCondition(BLINDED_ID, 1))

        state = engine.advance_turn(state)
        assert state.find(bob.id).conditions != ()

        state = engine.advance_turn(state)
        assert state.active_id == alice.id
        assert state.round == 2
        assert state.find(bob.id).conditions == ()

    def test_advance_turn_without_active(self, tracker):
        """Test advance_turn with nothing active just selects the first entry."""
        state, alice, _ = tracker
        state = engine.apply_condition(state, alice.id, AppliedCondition(BLINDED_ID, 2))
        state = InitiativeTrackerState(entries=state.entries)

        state = engine.advance_turn(state)

        assert state.active_id == alice.id
        assert state.find(alice.id).conditions[0].rounds_remaining == 2
