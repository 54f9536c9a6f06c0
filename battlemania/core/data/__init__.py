"""Core data definitions.

This package contains the static game data and shared enums:
- catalog.py: Ammunition and wall definitions, selections and the item catalog
- game_enums.py: Combatant slots, session statuses and end reasons
"""

from .catalog import (
    Ammunition,
    Wall,
    Selection,
    NO_SELECTION,
    Catalog,
    as_selection,
    get_catalog,
    DEFAULT_CATALOG_PATH,
)
from .game_enums import Slot, SessionStatus, EndReason, END_REASON_NAMES

__all__ = [
    "Ammunition",
    "Wall",
    "Selection",
    "NO_SELECTION",
    "Catalog",
    "as_selection",
    "get_catalog",
    "DEFAULT_CATALOG_PATH",
    "Slot",
    "SessionStatus",
    "EndReason",
    "END_REASON_NAMES",
]
