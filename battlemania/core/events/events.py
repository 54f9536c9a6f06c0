"""Engine events and their payloads.

This module defines every event the session manager publishes, so that
presentation layers (damage animations, score cards, telemetry) and the log
manager can follow a game without reaching into session state.

Event Design Principles:
- Events are immutable dataclasses
- Every event carries the session turn it happened on
- Payloads reuse engine objects (DamageReport, TurnRecord) instead of copies
- Event kinds are enum members, never strings
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..data.game_enums import EndReason

if TYPE_CHECKING:
    from ..engine.session import DamageReport, TurnRecord


class EventType(Enum):
    """Types of events that subscribers can listen to."""
    # Session lifecycle
    SESSION_STARTED = auto()
    SESSION_PAUSED = auto()
    SESSION_RESUMED = auto()
    SESSION_ENDED = auto()

    # Combat
    SELECTION_CHANGED = auto()
    TURN_RESOLVED = auto()
    COMBATANT_DAMAGED = auto()
    COMMAND_REJECTED = auto()

    # Logging
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all engine events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class SessionStarted(GameEvent):
    """Emitted once a session has been created and registered."""
    session_id: str
    combatant_ids: tuple[str, str]

    def __post_init__(self):
        # frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.SESSION_STARTED)


@dataclass(frozen=True)
class SessionPaused(GameEvent):
    session_id: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SESSION_PAUSED)


@dataclass(frozen=True)
class SessionResumed(GameEvent):
    session_id: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SESSION_RESUMED)


@dataclass(frozen=True)
class SessionEnded(GameEvent):
    """Emitted the first time a session reaches COMPLETED."""
    session_id: str
    winner: str
    reason: EndReason

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SESSION_ENDED)


@dataclass(frozen=True)
class SelectionChanged(GameEvent):
    """Emitted when a combatant stages ammunition or a wall for the next turn."""
    session_id: str
    combatant_id: str
    ammunition_id: Optional[str]
    wall_id: Optional[str]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SELECTION_CHANGED)


@dataclass(frozen=True)
class TurnResolved(GameEvent):
    """Emitted after a turn has been committed to the journal."""
    session_id: str
    record: "TurnRecord"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TURN_RESOLVED)


@dataclass(frozen=True)
class CombatantDamaged(GameEvent):
    """Emitted once per damage report of a committed turn, in report order."""
    session_id: str
    report: "DamageReport"
    remaining_health: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DAMAGED)


@dataclass(frozen=True)
class CommandRejected(GameEvent):
    """Emitted when a command fails validation; session state is untouched."""
    session_id: Optional[str]
    command_name: str
    error_code: str
    message: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMMAND_REJECTED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event for centralized log messages."""
    message: str
    category: str = "SYSTEM"
    level: str = "INFO"
    source: str = "unknown"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event for debug output that is hidden unless debug logging is on."""
    message: str
    source: str = "unknown"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event asking the log manager to write its buffer to disk."""
    directory: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
