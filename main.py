#!/usr/bin/env python3
"""Play a scripted Battlemania match and print the engine log."""

import argparse

import numpy as np

from battlemania.core.data import END_REASON_NAMES, NO_SELECTION, Selection, SessionStatus
from battlemania.core.engine import CombatantConfig
from battlemania.game import SessionManager


def choose_selections(manager: SessionManager, points: int, rng: np.random.Generator) -> tuple[Selection, Selection]:
    """Pick a random affordable ammunition and wall pair."""
    ammunition = [a for a in manager.catalog.all_ammunition() if a.cost <= points]
    if not ammunition:
        return NO_SELECTION, NO_SELECTION
    ammo = ammunition[rng.integers(len(ammunition))]

    walls = [w for w in manager.catalog.all_walls() if ammo.cost + w.cost <= points]
    # Sometimes skip the wall to keep points for later turns
    if not walls or rng.random() < 0.5:
        return Selection.item(ammo.id), NO_SELECTION
    wall = walls[rng.integers(len(walls))]
    return Selection.item(ammo.id), Selection.item(wall.id)


def main():
    parser = argparse.ArgumentParser(description="Run a scripted Battlemania match")
    parser.add_argument("--seed", type=int, default=7, help="random seed for selections")
    parser.add_argument("--points", type=int, default=200, help="starting points per combatant")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    manager = SessionManager()

    session_id = manager.start([
        CombatantConfig("player1", points=args.points),
        CombatantConfig("player2", points=args.points),
    ])

    snapshot = manager.snapshot(session_id)
    while snapshot['status'] == SessionStatus.ACTIVE.value:
        for combatant in snapshot['combatants']:
            ammo, wall = choose_selections(manager, combatant['points'], rng)
            manager.select_ammunition(session_id, combatant['id'], ammo)
            manager.select_wall(session_id, combatant['id'], wall)
        manager.play_selected_turn(session_id)
        snapshot = manager.snapshot(session_id)

    result = manager.end(session_id)

    for line in manager.log_manager.get_log_data()['messages']:
        print(line)
    print()
    print(f"Winner: {result.winner} ({END_REASON_NAMES[result.reason]})")
    for stats in result.stats:
        print(f"  {stats.combatant_id}: {stats.health} HP, "
              f"{stats.total_damage_dealt} damage dealt, {stats.points} pts left")


if __name__ == "__main__":
    main()
