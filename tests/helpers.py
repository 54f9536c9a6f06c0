"""Small builders shared by the test modules."""

from battlemania.core.engine.session import Combatant, Session, TurnAction
from battlemania.core.data.game_enums import Slot


def attack(combatant_id, ammunition=None, wall=None):
    """Build a TurnAction from bare ids (None means no selection)."""
    return TurnAction.create(combatant_id, ammunition, wall)


def make_session(first=("X", 100, 50), second=("Y", 100, 50), turn_limit=None):
    """Build a session directly from (id, health, points) tuples."""
    return Session(
        id="GAME_DIRECT",
        combatants=(
            Combatant(id=first[0], slot=Slot.FIRST, health=first[1], points=first[2]),
            Combatant(id=second[0], slot=Slot.SECOND, health=second[1], points=second[2]),
        ),
        turn_limit=turn_limit,
    )
