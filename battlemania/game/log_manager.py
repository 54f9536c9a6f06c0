"""
Log management for engine messages.

The log manager listens for log events on the event bus, keeps a bounded,
categorized buffer for display, filters it by level and category and can
write the whole buffer to a timestamped file.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional, Union, TYPE_CHECKING

from ..core.events import DebugMessage, EventType, LogMessage, LogSaveRequested

if TYPE_CHECKING:
    from ..core.events import EventManager, GameEvent


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()   # Startup, configuration, catalog loading
    SESSION = auto()  # Session lifecycle: start, pause, resume, end
    BATTLE = auto()   # Turn resolution and damage
    DEBUG = auto()
    WARNING = auto()  # Rejected commands
    ERROR = auto()


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.SESSION: "SES",
    LogCategory.BATTLE: "BTL",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogEntry:
    """A single buffered log line with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        parts = []
        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")
        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")
        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Buffers categorized engine messages received over the event bus."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_manager: Bus the log events arrive on
            max_messages: Maximum number of entries kept in the buffer
            default_level: Minimum level shown by :meth:`get_recent_messages`
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager

        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
            # SYSTEM, SESSION and BATTLE default to INFO
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.DEBUG_MESSAGE,
            self._handle_debug_message_event,
            subscriber_name="LogManager.debug_message"
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )

    def _handle_log_message_event(self, event: "GameEvent") -> None:
        if not isinstance(event, LogMessage):
            return
        try:
            category = LogCategory[event.category.upper()]
        except KeyError:
            # Unknown categories keep their severity
            category = {
                "WARNING": LogCategory.WARNING,
                "ERROR": LogCategory.ERROR,
                "DEBUG": LogCategory.DEBUG,
            }.get(event.level.upper(), LogCategory.SYSTEM)
        self.log(event.message, category)

    def _handle_debug_message_event(self, event: "GameEvent") -> None:
        if isinstance(event, DebugMessage):
            self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG)

    def _handle_log_save_request(self, event: "GameEvent") -> None:
        if isinstance(event, LogSaveRequested):
            self.save_log_to_file(event.directory or "logs")

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        """Add a message to the buffer regardless of the current filters."""
        self.messages.append(LogEntry(text=text, category=category))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def session(self, text: str) -> None:
        self.log(text, LogCategory.SESSION)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def get_recent_messages(
        self,
        count: Optional[int] = None,
        categories: Optional[set[LogCategory]] = None
    ) -> list[LogEntry]:
        """Get recent messages, optionally restricted to some categories.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Categories to include (None applies the level filter instead)

        Returns:
            Matching messages, oldest first
        """
        filtered = []
        for msg in self.messages:
            if msg.category not in self.enabled_categories:
                continue
            if categories:
                if msg.category not in categories:
                    continue
            elif self.category_levels.get(msg.category, LogLevel.INFO).value < self.log_level.value:
                continue
            filtered.append(msg)

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_log_data(self) -> dict[str, Any]:
        """Formatted buffer for display."""
        return {
            'messages': [msg.format() for msg in self.get_recent_messages()],
            'debug_enabled': self.is_debug_enabled(),
            'total_messages': len(self.messages),
        }

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.enabled_categories and self.log_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, directory: Union[str, Path] = "logs") -> Optional[Path]:
        """Write every buffered message, ignoring filters, to a timestamped file.

        Returns:
            Path of the written file, or None if it could not be written
        """
        log_dir = Path(directory)
        filepath = log_dir / f"battlemania_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.log"
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Battlemania - Engine Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")
                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Engine log saved to {filepath}")
        return filepath
