"""Battlemania turn-based combat engine."""

from .core.data import Ammunition, Wall, Selection, NO_SELECTION, Catalog, get_catalog, SessionStatus, EndReason, Slot
from .core.engine import Combatant, CombatantConfig, TurnAction, DamageReport, TurnRecord, Session, TurnResolver
from .game import GameConfig, SessionLifecycle, SessionManager, TurnResult, EndResult

__version__ = "0.1.0"
