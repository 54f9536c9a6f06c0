"""Session orchestration.

- config.py: YAML-backed engine configuration
- session_lifecycle.py: Start, play, pause/resume and end sessions
- session_manager.py: Session registry, per-session locking and event publishing
- commands.py: Typed commands accepted by the session manager
- log_manager.py: Categorized log buffer fed by the event bus
"""

from .commands import (
    Command,
    StartSession,
    PlayTurn,
    PlaySelectedTurn,
    EndSession,
    PauseSession,
    ResumeSession,
    SelectAmmunition,
    SelectWall,
)
from .config import GameConfig, DEFAULT_CONFIG_PATH
from .log_manager import LogManager, LogCategory, LogLevel, LogEntry
from .session_lifecycle import (
    CONFIG_DEFAULT,
    SessionLifecycle,
    TurnResult,
    EndResult,
    CombatantStats,
    determine_winner,
    generate_session_id,
)
from .session_manager import SessionManager

__all__ = [
    "Command",
    "StartSession",
    "PlayTurn",
    "PlaySelectedTurn",
    "EndSession",
    "PauseSession",
    "ResumeSession",
    "SelectAmmunition",
    "SelectWall",
    "GameConfig",
    "DEFAULT_CONFIG_PATH",
    "LogManager",
    "LogCategory",
    "LogLevel",
    "LogEntry",
    "CONFIG_DEFAULT",
    "SessionLifecycle",
    "TurnResult",
    "EndResult",
    "CombatantStats",
    "determine_winner",
    "generate_session_id",
    "SessionManager",
]
