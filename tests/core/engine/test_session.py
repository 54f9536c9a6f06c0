"""
Unit tests for the session data model.

Tests combatant bookkeeping, turn actions, the journal and the guards that
keep a session's invariants.
"""

import pytest

from battlemania.core.data.catalog import NO_SELECTION, Selection
from battlemania.core.data.game_enums import EndReason, SessionStatus, Slot
from battlemania.core.engine.session import (
    Combatant,
    DamageReport,
    Session,
    TurnAction,
    TurnRecord,
)
from battlemania.core.errors import InvalidConfiguration
from tests.helpers import make_session


class TestCombatant:
    """Test Combatant state changes."""

    def test_take_damage_reduces_health(self):
        combatant = Combatant(id="X", slot=Slot.FIRST, health=100, points=50)

        remaining = combatant.take_damage(30)

        assert remaining == 70
        assert combatant.health == 70

    def test_health_floor_is_zero(self):
        combatant = Combatant(id="X", slot=Slot.FIRST, health=20, points=50)

        combatant.take_damage(50)

        assert combatant.health == 0
        assert combatant.is_defeated

    def test_clear_selections(self):
        combatant = Combatant(
            id="X", slot=Slot.FIRST, health=100, points=50,
            selected_ammunition=Selection.item("AMMO_01"),
            selected_wall=Selection.item("WALL_01"),
        )

        combatant.clear_selections()

        assert combatant.selected_ammunition == NO_SELECTION
        assert combatant.selected_wall == NO_SELECTION

    def test_slot_opponent(self):
        assert Slot.FIRST.opponent is Slot.SECOND
        assert Slot.SECOND.opponent is Slot.FIRST


class TestTurnAction:
    """Test TurnAction construction."""

    def test_bare_ids_become_selections(self):
        action = TurnAction("X", "AMMO_01", None)

        assert action.ammunition == Selection.item("AMMO_01")
        assert action.wall == NO_SELECTION

    def test_create_defaults_to_no_selection(self):
        action = TurnAction.create("Y")

        assert action.ammunition.is_empty
        assert action.wall.is_empty

    def test_to_dict(self):
        action = TurnAction.create("X", "AMMO_02", "WALL_01")

        assert action.to_dict() == {
            'combatant_id': "X",
            'ammunition_id': "AMMO_02",
            'wall_id': "WALL_01",
        }


class TestSession:
    """Test Session invariants and helpers."""

    def test_new_session_defaults(self):
        session = make_session()

        assert session.status == SessionStatus.ACTIVE
        assert session.current_turn == 1
        assert session.turn_history == ()
        assert session.winner is None

    def test_requires_two_combatants(self):
        only = Combatant(id="X", slot=Slot.FIRST, health=100, points=50)
        with pytest.raises(InvalidConfiguration):
            Session(id="S", combatants=(only,))  # type: ignore[arg-type]

    def test_requires_distinct_ids(self):
        with pytest.raises(InvalidConfiguration):
            make_session(first=("X", 100, 50), second=("X", 100, 50))

    def test_opponent_of(self):
        session = make_session()

        assert session.opponent_of("X").id == "Y"
        assert session.opponent_of("Y").id == "X"
        assert session.opponent_of("Z") is None

    def test_get_by_slot(self):
        session = make_session()

        assert session.get_by_slot(Slot.FIRST).id == "X"
        assert session.get_by_slot(Slot.SECOND).id == "Y"

    def test_append_turn_advances_counter(self):
        session = make_session()
        record = TurnRecord(turn_number=1, actions=(), damages=())

        session.append_turn(record)

        assert session.current_turn == 2
        assert session.turn_history == (record,)

    def test_append_out_of_order_turn_is_a_bug(self):
        session = make_session()
        with pytest.raises(RuntimeError):
            session.append_turn(TurnRecord(turn_number=2, actions=(), damages=()))

    def test_history_view_cannot_mutate_journal(self):
        session = make_session()
        session.append_turn(TurnRecord(turn_number=1, actions=(), damages=()))

        history = session.turn_history
        assert isinstance(history, tuple)
        assert len(session.turn_history) == 1

    def test_complete_freezes_winner(self):
        session = make_session()

        session.complete("Y", EndReason.EXPLICIT)

        assert session.is_completed
        assert session.winner == "Y"
        with pytest.raises(RuntimeError):
            session.complete("X", EndReason.EXPLICIT)

    def test_completed_status_is_sealed(self):
        session = make_session()
        session.complete("X", EndReason.KNOCKOUT)

        with pytest.raises(RuntimeError):
            session.set_status(SessionStatus.ACTIVE)
        assert session.status == SessionStatus.COMPLETED

    def test_turn_limit_exceeded(self):
        session = make_session(turn_limit=1)
        assert not session.turn_limit_exceeded

        session.append_turn(TurnRecord(turn_number=1, actions=(), damages=()))

        assert session.turn_limit_exceeded

    def test_no_turn_limit(self):
        session = make_session(turn_limit=None)
        session.current_turn = 500

        assert not session.turn_limit_exceeded

    def test_snapshot(self):
        session = make_session()
        report = DamageReport("X", "Y", 30, "AMMO_03", 0)
        session.append_turn(TurnRecord(
            turn_number=1,
            actions=(TurnAction.create("X", "AMMO_03"), TurnAction.create("Y")),
            damages=(report,),
        ))

        snapshot = session.snapshot()

        assert snapshot['status'] == "ACTIVE"
        assert snapshot['current_turn'] == 2
        assert snapshot['combatants'][0]['id'] == "X"
        assert snapshot['combatants'][1]['selected_wall_id'] is None
        assert snapshot['turn_history'][0]['damages'][0]['damage'] == 30
        assert snapshot['turn_history'][0]['actions'][1]['ammunition_id'] is None
