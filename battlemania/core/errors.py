"""Error taxonomy for the combat engine.

Every failure the engine reports derives from :class:`BattlemaniaError` and
carries a stable ``code`` so presentation layers can map each one to its own
message. All of them are raised before any session state is mutated.
"""

from typing import Optional


class BattlemaniaError(Exception):
    """Base class for all engine errors."""

    code = "error"


class InvalidConfiguration(BattlemaniaError):
    """Raised when a session cannot be started from the supplied configs."""

    code = "invalid_configuration"


class InvalidTurnComposition(BattlemaniaError):
    """Raised when a turn does not carry one action per combatant."""

    code = "invalid_turn_composition"


class UnknownAmmunition(BattlemaniaError):
    """Raised when an ammunition id is not in the catalog."""

    code = "unknown_ammunition"

    def __init__(self, ammunition_id: str):
        super().__init__(f"Invalid ammunition ID: {ammunition_id}")
        self.ammunition_id = ammunition_id


class UnknownWall(BattlemaniaError):
    """Raised when a wall id is not in the catalog."""

    code = "unknown_wall"

    def __init__(self, wall_id: str):
        super().__init__(f"Invalid wall ID: {wall_id}")
        self.wall_id = wall_id


class TurnNumberMismatch(BattlemaniaError):
    """Raised for out-of-order or replayed turn submissions."""

    code = "turn_number_mismatch"

    def __init__(self, session_id: str, expected: int, received: int):
        super().__init__(
            f"Session {session_id} expects turn {expected}, got turn {received}"
        )
        self.session_id = session_id
        self.expected = expected
        self.received = received


class StaleSession(BattlemaniaError):
    """Raised when an operation targets a session in the wrong status."""

    code = "stale_session"

    def __init__(self, session_id: str, status: str, operation: str = "play a turn"):
        super().__init__(f"Cannot {operation} in session {session_id} (status {status})")
        self.session_id = session_id
        self.status = status
        self.operation = operation


class InsufficientPoints(BattlemaniaError):
    """Raised when a combatant cannot afford their own selections."""

    code = "insufficient_points"

    def __init__(self, combatant_id: str, required: int, available: int):
        super().__init__(
            f"Combatant {combatant_id} needs {required} points but has {available}"
        )
        self.combatant_id = combatant_id
        self.required = required
        self.available = available


class SessionNotFound(BattlemaniaError):
    """Raised when a session id is not known to the session manager."""

    code = "session_not_found"

    def __init__(self, session_id: str):
        super().__init__(f"No session with id {session_id}")
        self.session_id = session_id


class CatalogLoadError(BattlemaniaError):
    """Raised when the item catalog file is missing or malformed."""

    code = "catalog_load_error"


class ConfigLoadError(BattlemaniaError):
    """Raised when the engine configuration file is missing or malformed."""

    code = "config_load_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{message} ({path})" if path else message)
        self.path = path
