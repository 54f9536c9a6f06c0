"""Combat engine core.

- session.py: Combatants, turn actions, damage reports, the turn journal and sessions
- turn_resolver.py: Pure resolution of one simultaneous exchange
"""

from .session import Combatant, CombatantConfig, TurnAction, DamageReport, TurnRecord, Session
from .turn_resolver import TurnResolver

__all__ = [
    "Combatant",
    "CombatantConfig",
    "TurnAction",
    "DamageReport",
    "TurnRecord",
    "Session",
    "TurnResolver",
]
