"""Centralized game enums and constants.

This module contains the enums shared by the catalog, the session model and
the lifecycle layer, providing a single source of truth for states and
positions.
"""

from enum import Enum


class Slot(Enum):
    """Position of a combatant within a session."""
    FIRST = 0
    SECOND = 1

    @property
    def opponent(self) -> "Slot":
        """The other slot; every turn pits a combatant against this one."""
        return Slot.SECOND if self is Slot.FIRST else Slot.FIRST


class SessionStatus(Enum):
    """Lifecycle status of a game session."""
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class EndReason(Enum):
    """Why a session was retired."""
    EXPLICIT = "explicit"        # Caller ended the game
    TURN_LIMIT = "turns_completed"  # Configured number of turns played
    KNOCKOUT = "damage"          # A combatant's health reached zero


END_REASON_NAMES = {
    EndReason.EXPLICIT: "Ended by request",
    EndReason.TURN_LIMIT: "Turn limit reached",
    EndReason.KNOCKOUT: "Knockout",
}
