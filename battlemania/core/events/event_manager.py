"""
Event bus connecting the session manager to its observers.

The session manager publishes domain events (turns resolved, damage taken,
sessions ended) and log events; the log manager and any presentation layer
subscribe to the types they care about. Publishing never calls back into the
engine, so observers cannot change the outcome of a turn.
"""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities; lower value is processed first."""
    CRITICAL = 0
    HIGH = 1
    NORMAL = 2
    LOW = 3


@dataclass
class QueuedEvent:
    """An event waiting in the queue, with metadata for ordering and debugging."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    sequence: int = 0
    source: Optional[str] = None

    def __lt__(self, other: "QueuedEvent") -> bool:
        if self.priority.value != other.priority.value:
            return self.priority.value < other.priority.value
        # Same priority: publication order
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Publisher/subscriber bus with a priority queue and bounded history."""

    def __init__(self, enable_debug_logging: bool = False, history_size: int = 1000):
        """Initialize the event manager.

        Args:
            enable_debug_logging: Whether to report bus activity to the debug callback
            history_size: Number of processed events kept for inspection
        """
        self.enable_debug_logging = enable_debug_logging

        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._universal_subscribers: list[EventSubscriber] = []

        self._event_queue: deque[QueuedEvent] = deque()
        self._event_history: deque[QueuedEvent] = deque(maxlen=history_size)
        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0

        self._lock = threading.RLock()
        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Set a callback that receives bus debug output."""
        self._debug_callback = callback

    def _debug_log(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback invoked with each matching event
            subscriber_name: Optional name for debugging
        """
        with self._lock:
            self._subscribers[event_type].append(subscriber)
            name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(f"Subscribed {name} to {event_type.name} events")

    def subscribe_all(
        self,
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to every event regardless of type."""
        with self._lock:
            self._universal_subscribers.append(subscriber)
            name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(f"Subscribed {name} to ALL events")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Remove a typed subscription.

        Returns:
            True if the subscriber was found and removed
        """
        with self._lock:
            try:
                self._subscribers[event_type].remove(subscriber)
            except ValueError:
                return False
            self._debug_log(f"Unsubscribed from {event_type.name} events")
            return True

    def unsubscribe_all(self, subscriber: EventSubscriber) -> bool:
        """Remove a universal subscription."""
        with self._lock:
            try:
                self._universal_subscribers.remove(subscriber)
            except ValueError:
                return False
            self._debug_log("Unsubscribed from ALL events")
            return True

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event; it is delivered by the next :meth:`process_events`."""
        with self._lock:
            self._events_published += 1
            queued = QueuedEvent(
                event=event,
                priority=priority,
                sequence=self._events_published,
                source=source or "unknown",
            )
            self._event_queue.append(queued)
            self._debug_log(
                f"Published {event.__class__.__name__} "
                f"(priority: {priority.name}, source: {queued.source})"
            )

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Deliver an event to subscribers right away, bypassing the queue."""
        with self._lock:
            self._events_published += 1
            sequence = self._events_published
        self._process_event(QueuedEvent(
            event=event,
            priority=EventPriority.CRITICAL,
            sequence=sequence,
            source=source or "immediate",
        ))

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events in priority order.

        Args:
            max_events: Maximum number of events to deliver (None for all)

        Returns:
            Number of events delivered
        """
        with self._lock:
            pending = sorted(self._event_queue)
            self._event_queue.clear()
            if max_events is not None and max_events < len(pending):
                # Keep the remainder queued, in order
                self._event_queue.extend(pending[max_events:])
                pending = pending[:max_events]

        for queued in pending:
            self._process_event(queued)
        return len(pending)

    def _process_event(self, queued: QueuedEvent) -> None:
        event = queued.event

        with self._lock:
            self._event_history.append(queued)
            self._events_processed += 1
            subscribers = list(self._subscribers.get(event.event_type, []))
            universal = list(self._universal_subscribers)

        self._debug_log(
            f"Processing {event.__class__.__name__} from {queued.source} (turn: {event.turn})"
        )

        # A failing observer must not stop delivery to the others
        for subscriber in subscribers + universal:
            try:
                subscriber(event)
            except Exception as e:
                with self._lock:
                    self._subscriber_errors += 1
                self._debug_log(
                    f"Error in subscriber {getattr(subscriber, '__name__', 'anonymous')}: {e}"
                )

    def clear_queue(self) -> int:
        """Drop all queued events.

        Returns:
            Number of events that were dropped
        """
        with self._lock:
            count = len(self._event_queue)
            self._event_queue.clear()
            self._debug_log(f"Cleared {count} queued events")
            return count

    def has_queued_events(self) -> bool:
        with self._lock:
            return len(self._event_queue) > 0

    def get_statistics(self) -> dict[str, Any]:
        """Counters describing bus activity."""
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'universal_subscribers_count': len(self._universal_subscribers),
                'subscriber_errors': self._subscriber_errors,
                'event_history_size': len(self._event_history),
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Describe the most recently delivered events, oldest first."""
        with self._lock:
            recent = list(self._event_history)[-count:]
            return [
                {
                    'event_type': queued.event.event_type.name,
                    'turn': queued.event.turn,
                    'priority': queued.priority.name,
                    'source': queued.source,
                    'timestamp': queued.timestamp.isoformat(),
                }
                for queued in recent
            ]

    def shutdown(self) -> None:
        """Drop all subscribers, queued events and history."""
        with self._lock:
            self._subscribers.clear()
            self._universal_subscribers.clear()
            self._event_queue.clear()
            self._event_history.clear()
            self._debug_log("Event manager shutdown complete")
