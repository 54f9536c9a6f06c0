"""Event system.

- events.py: Event types and immutable event payloads
- event_manager.py: Publisher/subscriber bus with priorities and history
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    EventType,
    GameEvent,
    SessionStarted,
    SessionPaused,
    SessionResumed,
    SessionEnded,
    SelectionChanged,
    TurnResolved,
    CombatantDamaged,
    CommandRejected,
    LogMessage,
    DebugMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "EventType",
    "GameEvent",
    "SessionStarted",
    "SessionPaused",
    "SessionResumed",
    "SessionEnded",
    "SelectionChanged",
    "TurnResolved",
    "CombatantDamaged",
    "CommandRejected",
    "LogMessage",
    "DebugMessage",
    "LogSaveRequested",
]
