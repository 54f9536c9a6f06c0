"""
Turn resolution for simultaneous ammunition/wall exchanges.

Both combatants commit their choices at the same time. Each attacker's
ammunition meets the *opponent's* wall, so the two directions of the exchange
are independent of each other and of the order the reports are applied in.

Resolution is pure: it validates the turn, computes two damage reports and
returns them without touching any session state.
"""
from typing import Iterable, Optional, Sequence

import numpy as np

from ..data.catalog import Ammunition, Catalog, Selection, Wall
from ..errors import InvalidTurnComposition
from .session import DamageReport, TurnAction


class TurnResolver:
    """Computes the damage exchanged in one turn."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    @staticmethod
    def calculate_damage(raw_damage: int, wall_defense: int) -> int:
        """Damage left after a wall absorbs its share; never negative."""
        return max(0, raw_damage - wall_defense)

    @staticmethod
    def validate_composition(
        actions: Sequence[TurnAction],
        combatant_ids: Optional[Iterable[str]] = None
    ) -> None:
        """Check that a turn carries exactly one action per combatant.

        Args:
            actions: The submitted actions, in submission order
            combatant_ids: Ids of the session's combatants, if known

        Raises:
            InvalidTurnComposition: If the actions do not pair up the two combatants
        """
        if len(actions) != 2:
            raise InvalidTurnComposition(
                f"Both combatants must submit exactly one action, got {len(actions)} actions"
            )

        first_id, second_id = actions[0].combatant_id, actions[1].combatant_id
        if first_id == second_id:
            raise InvalidTurnComposition(
                f"Actions must come from different combatants, got {first_id!r} twice"
            )

        if combatant_ids is not None:
            expected = set(combatant_ids)
            if {first_id, second_id} != expected:
                raise InvalidTurnComposition(
                    f"Actions name {sorted([first_id, second_id])}, "
                    f"session combatants are {sorted(expected)}"
                )

    def resolve(
        self,
        actions: Sequence[TurnAction],
        combatant_ids: Optional[Iterable[str]] = None
    ) -> list[DamageReport]:
        """
        Resolve both directions of a turn's exchange.

        Args:
            actions: Exactly two actions from distinct combatants
            combatant_ids: Ids of the session's combatants, if known

        Returns:
            Two damage reports, in the same order as ``actions``

        Raises:
            InvalidTurnComposition: If the actions do not pair up the two combatants
            UnknownAmmunition: If an ammunition id is not in the catalog
            UnknownWall: If a wall id is not in the catalog
        """
        actions = list(actions)
        self.validate_composition(actions, combatant_ids)

        # Resolve every id before computing anything so failures are atomic
        ammunition = [self.catalog.resolve_ammunition(a.ammunition) for a in actions]
        walls = [self.catalog.resolve_wall(a.wall) for a in actions]

        raw_damages = np.array([_damage_of(ammo) for ammo in ammunition], dtype=np.int64)
        wall_defenses = np.array([_defense_of(wall) for wall in walls], dtype=np.int64)

        # Attacker i meets the wall of the other combatant
        opposing_defenses = wall_defenses[::-1]
        damages = np.maximum(0, raw_damages - opposing_defenses)

        reports = []
        for index, action in enumerate(actions):
            target = actions[1 - index]
            ammo = ammunition[index]
            reports.append(DamageReport(
                from_combatant=action.combatant_id,
                to_combatant=target.combatant_id,
                damage=int(damages[index]),
                ammunition_id=ammo.id if ammo else None,
                defended_by=int(opposing_defenses[index]),
            ))
        return reports

    def preview(self, ammunition: Selection, wall: Selection) -> int:
        """Forecast the damage one attack would deal against one wall."""
        ammo = self.catalog.resolve_ammunition(ammunition)
        defending_wall = self.catalog.resolve_wall(wall)
        return self.calculate_damage(_damage_of(ammo), _defense_of(defending_wall))

    def turn_cost(self, action: TurnAction) -> int:
        """Points an action costs its combatant."""
        return self.catalog.selection_cost(action.ammunition, action.wall)


def _damage_of(ammo: Optional[Ammunition]) -> int:
    # No ammunition selected means no attack
    return ammo.damage if ammo is not None else 0


def _defense_of(wall: Optional[Wall]) -> int:
    return wall.defense if wall is not None else 0
