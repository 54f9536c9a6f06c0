"""
Unit tests for the TurnResolver.

Tests the damage formula in both directions of an exchange, report ordering,
turn composition validation and atomic failure on unknown items.
"""

import pytest

from battlemania.core.data.catalog import NO_SELECTION, Ammunition, Catalog, Selection, Wall
from battlemania.core.engine.turn_resolver import TurnResolver
from battlemania.core.errors import InvalidTurnComposition, UnknownAmmunition, UnknownWall
from tests.helpers import attack


@pytest.fixture
def resolver(catalog):
    return TurnResolver(catalog)


class TestDamageCalculation:
    """Test the damage formula."""

    def test_unmitigated_damage(self):
        assert TurnResolver.calculate_damage(30, 0) == 30

    def test_partial_mitigation(self):
        assert TurnResolver.calculate_damage(40, 10) == 30

    def test_full_absorption(self):
        assert TurnResolver.calculate_damage(10, 10) == 0

    def test_never_negative(self):
        # A wall bigger than the attack absorbs it but does not heal
        assert TurnResolver.calculate_damage(10, 50) == 0

    def test_preview(self, resolver):
        assert resolver.preview(Selection.item("AMMO_05"), Selection.item("WALL_02")) == 30
        assert resolver.preview(NO_SELECTION, Selection.item("WALL_02")) == 0
        assert resolver.preview(Selection.item("AMMO_01"), NO_SELECTION) == 10


class TestResolve:
    """Test resolving complete turns."""

    def test_scenario_exchange(self, resolver):
        """X fires 30 at an unwalled Y; Y fires 10 into X's 10 wall."""
        reports = resolver.resolve([
            attack("X", "AMMO_03", "WALL_01"),
            attack("Y", "AMMO_01"),
        ])

        x_to_y, y_to_x = reports
        assert (x_to_y.from_combatant, x_to_y.to_combatant) == ("X", "Y")
        assert x_to_y.damage == 30
        assert x_to_y.defended_by == 0
        assert x_to_y.ammunition_id == "AMMO_03"
        assert (y_to_x.from_combatant, y_to_x.to_combatant) == ("Y", "X")
        assert y_to_x.damage == 0
        assert y_to_x.defended_by == 10

    def test_reports_follow_submission_order(self, resolver):
        reports = resolver.resolve([attack("Y", "AMMO_02"), attack("X", "AMMO_04")])

        assert [r.from_combatant for r in reports] == ["Y", "X"]
        assert [r.damage for r in reports] == [20, 40]

    def test_directions_are_independent(self, resolver):
        """Each attacker meets the opponent's wall, not their own."""
        reports = resolver.resolve([
            attack("X", "AMMO_05", "WALL_05"),
            attack("Y", "AMMO_02", "WALL_01"),
        ])

        assert reports[0].damage == 40  # 50 - Y's 10
        assert reports[1].damage == 0   # 20 - X's 50, floored
        assert reports[0].defended_by == 10
        assert reports[1].defended_by == 50

    def test_zero_attack_turn(self, resolver):
        reports = resolver.resolve([attack("X"), attack("Y")])

        assert [r.damage for r in reports] == [0, 0]
        assert [r.ammunition_id for r in reports] == [None, None]

    def test_wall_without_attack(self, resolver):
        reports = resolver.resolve([attack("X", None, "WALL_03"), attack("Y")])

        assert reports[0].damage == 0
        assert reports[1].defended_by == 30

    def test_result_types_are_plain_ints(self, resolver):
        reports = resolver.resolve([attack("X", "AMMO_01"), attack("Y", "AMMO_01")])

        assert type(reports[0].damage) is int
        assert type(reports[0].defended_by) is int

    def test_every_pairing_matches_formula(self, resolver, catalog):
        for ammo in catalog.all_ammunition():
            for wall in catalog.all_walls():
                reports = resolver.resolve([attack("X", ammo.id), attack("Y", None, wall.id)])
                assert reports[0].damage == max(0, ammo.damage - wall.defense)

    def test_custom_catalog(self):
        catalog = Catalog(
            [Ammunition(id="BIG", name="Big", damage=1000, cost=0)],
            [Wall(id="THIN", name="Thin", defense=1, cost=0)],
        )
        reports = TurnResolver(catalog).resolve([attack("A", "BIG"), attack("B", None, "THIN")])

        assert reports[0].damage == 999


class TestComposition:
    """Test turn composition validation."""

    def test_single_action_rejected(self, resolver):
        with pytest.raises(InvalidTurnComposition):
            resolver.resolve([attack("X", "AMMO_01")])

    def test_three_actions_rejected(self, resolver):
        with pytest.raises(InvalidTurnComposition):
            resolver.resolve([attack("X"), attack("Y"), attack("Z")])

    def test_empty_turn_rejected(self, resolver):
        with pytest.raises(InvalidTurnComposition):
            resolver.resolve([])

    def test_same_combatant_twice_rejected(self, resolver):
        with pytest.raises(InvalidTurnComposition):
            resolver.resolve([attack("X", "AMMO_01"), attack("X", "AMMO_02")])

    def test_foreign_combatant_rejected(self, resolver):
        with pytest.raises(InvalidTurnComposition):
            resolver.resolve([attack("X"), attack("Z")], combatant_ids=("X", "Y"))

    def test_matching_combatants_accepted(self, resolver):
        reports = resolver.resolve([attack("Y"), attack("X")], combatant_ids=("X", "Y"))

        assert len(reports) == 2


class TestUnknownItems:
    """Test that unknown ids fail the whole turn."""

    def test_unknown_ammunition(self, resolver):
        with pytest.raises(UnknownAmmunition):
            resolver.resolve([attack("X", "AMMO_01"), attack("Y", "NUKE")])

    def test_unknown_wall(self, resolver):
        with pytest.raises(UnknownWall):
            resolver.resolve([attack("X", None, "MOAT"), attack("Y", "AMMO_01")])

    def test_turn_cost(self, resolver):
        assert resolver.turn_cost(attack("X", "AMMO_03", "WALL_02")) == 50
        assert resolver.turn_cost(attack("X")) == 0
