"""
Session manager: the engine's command and query surface.

The manager owns every live session keyed by id and serializes all
operations on one session through that session's lock, so at most one turn
is ever in flight per session even when a transport layer calls in from
several threads. Different sessions proceed independently.

After each operation the manager publishes domain and log events on the
event bus and delivers them. Rejected commands are reported as a
``CommandRejected`` event plus a warning log line, then re-raised unchanged.
"""
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from ..core.data.catalog import Catalog, SelectionLike
from ..core.data.game_enums import END_REASON_NAMES
from ..core.engine.session import Session, TurnAction, TurnRecord
from ..core.errors import BattlemaniaError, InvalidConfiguration, SessionNotFound
from ..core.events import (
    CombatantDamaged,
    CommandRejected,
    EventManager,
    EventPriority,
    LogMessage,
    SelectionChanged,
    SessionEnded,
    SessionPaused,
    SessionResumed,
    SessionStarted,
    TurnResolved,
)
from .commands import Command
from .config import GameConfig
from .log_manager import LogLevel, LogManager
from .session_lifecycle import CONFIG_DEFAULT, ConfigLike, EndResult, SessionLifecycle, TurnResult


class SessionManager:
    """Registry of sessions with per-session serialization."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog: Optional[Catalog] = None,
        event_manager: Optional[EventManager] = None
    ):
        """Initialize the session manager.

        Args:
            config: Engine configuration; the bundled YAML config when omitted
            catalog: Item catalog; the one named by ``config`` when omitted
            event_manager: Bus to publish on; a private one when omitted
        """
        self.config = config or GameConfig.load_default()
        self.catalog = catalog or self.config.load_catalog()
        self.event_manager = event_manager or EventManager(
            enable_debug_logging=self.config.debug_logging
        )
        self.lifecycle = SessionLifecycle(self.catalog, self.config)
        self.log_manager = LogManager(
            self.event_manager,
            max_messages=self.config.max_log_messages,
            default_level=LogLevel.DEBUG if self.config.debug_logging else LogLevel.INFO,
        )

        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self._current_session_id: Optional[str] = None

        self._emit_log(
            f"Session manager ready ({len(self.catalog.all_ammunition())} ammunition, "
            f"{len(self.catalog.all_walls())} walls)",
            "SYSTEM"
        )
        self._flush_events()

    # ---- commands ----

    def dispatch(self, command: Command) -> Any:
        """Execute a typed command against this manager."""
        if not isinstance(command, Command):
            raise TypeError(f"Unsupported command: {command!r}")
        return command.execute(self)

    def start(
        self,
        combatant_configs: Sequence[ConfigLike],
        turn_limit: Optional[int] = CONFIG_DEFAULT,
        session_id: Optional[str] = None
    ) -> str:
        """Create and register a session; it becomes the current session.

        ``turn_limit=None`` disables the turn limit for this session; leaving
        it out uses the configured limit.

        Returns:
            The new session's id
        """
        with self._rejecting("start", session_id):
            with self._registry_lock:
                if session_id is not None and session_id in self._sessions:
                    raise InvalidConfiguration(f"Session {session_id} already exists")
                session = self.lifecycle.start(combatant_configs, session_id, turn_limit)
                self._sessions[session.id] = session
                self._locks[session.id] = threading.RLock()
                self._current_session_id = session.id

        self.event_manager.publish(
            SessionStarted(turn=session.current_turn, session_id=session.id,
                           combatant_ids=session.combatant_ids),
            source="SessionManager"
        )
        first, second = session.combatants
        self._emit_log(
            f"Session {session.id} started: {first.id} ({first.health} HP, {first.points} pts) "
            f"vs {second.id} ({second.health} HP, {second.points} pts)",
            "SESSION"
        )
        self._flush_events()
        return session.id

    def play_turn(self, session_id: str, turn_number: int, actions: Sequence[TurnAction]) -> TurnResult:
        """Resolve and commit one turn of a session."""
        with self._rejecting("play_turn", session_id):
            with self._session_lock(session_id) as session:
                result = self.lifecycle.play_turn(session, turn_number, actions)
                record = session.turn_history[-1]
                remaining = {c.id: c.health for c in session.combatants}
        self._publish_turn(session_id, record, remaining, result)
        return result

    def play_selected_turn(self, session_id: str) -> TurnResult:
        """Play the current turn from each combatant's staged selections."""
        with self._rejecting("play_selected_turn", session_id):
            with self._session_lock(session_id) as session:
                actions = self.lifecycle.actions_from_selections(session)
                result = self.lifecycle.play_turn(session, session.current_turn, actions)
                record = session.turn_history[-1]
                remaining = {c.id: c.health for c in session.combatants}
        self._publish_turn(session_id, record, remaining, result)
        return result

    def end(self, session_id: str) -> EndResult:
        """End a session; repeated calls return the same result."""
        with self._rejecting("end", session_id):
            with self._session_lock(session_id) as session:
                already_completed = session.is_completed
                result = self.lifecycle.end(session)
                turn = session.current_turn
        if not already_completed:
            self._publish_end(result, turn)
        self._flush_events()
        return result

    def pause(self, session_id: str) -> None:
        with self._rejecting("pause", session_id):
            with self._session_lock(session_id) as session:
                self.lifecycle.pause(session)
                turn = session.current_turn
        self.event_manager.publish(SessionPaused(turn=turn, session_id=session_id), source="SessionManager")
        self._emit_log(f"Session {session_id} paused at turn {turn}", "SESSION")
        self._flush_events()

    def resume(self, session_id: str) -> None:
        with self._rejecting("resume", session_id):
            with self._session_lock(session_id) as session:
                self.lifecycle.resume(session)
                turn = session.current_turn
        self.event_manager.publish(SessionResumed(turn=turn, session_id=session_id), source="SessionManager")
        self._emit_log(f"Session {session_id} resumed at turn {turn}", "SESSION")
        self._flush_events()

    def select_ammunition(self, session_id: str, combatant_id: str, ammunition: SelectionLike) -> None:
        with self._rejecting("select_ammunition", session_id):
            with self._session_lock(session_id) as session:
                self.lifecycle.select_ammunition(session, combatant_id, ammunition)
                self._publish_selection(session, combatant_id)
        self._flush_events()

    def select_wall(self, session_id: str, combatant_id: str, wall: SelectionLike) -> None:
        with self._rejecting("select_wall", session_id):
            with self._session_lock(session_id) as session:
                self.lifecycle.select_wall(session, combatant_id, wall)
                self._publish_selection(session, combatant_id)
        self._flush_events()

    def reset(self) -> None:
        """Forget the current session pointer; sessions stay registered."""
        self._current_session_id = None
        self._emit_log("Current session cleared", "SESSION")
        self._flush_events()

    # ---- queries ----

    def get_session(self, session_id: str) -> Session:
        """The live session object.

        Reading it does not take the session lock; use :meth:`snapshot` for a
        consistent view while other threads may be playing turns.
        """
        with self._registry_lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def snapshot(self, session_id: str) -> dict[str, Any]:
        """Consistent plain-data view of a session."""
        with self._session_lock(session_id) as session:
            return session.snapshot()

    def turn_history(self, session_id: str) -> tuple[TurnRecord, ...]:
        with self._session_lock(session_id) as session:
            return session.turn_history

    def all_sessions(self) -> dict[str, Session]:
        with self._registry_lock:
            return dict(self._sessions)

    def current_session(self) -> Optional[Session]:
        with self._registry_lock:
            if self._current_session_id is None:
                return None
            return self._sessions.get(self._current_session_id)

    # ---- internals ----

    @contextmanager
    def _session_lock(self, session_id: str) -> Iterator[Session]:
        with self._registry_lock:
            session = self._sessions.get(session_id)
            lock = self._locks.get(session_id)
        if session is None or lock is None:
            raise SessionNotFound(session_id)
        with lock:
            yield session

    @contextmanager
    def _rejecting(self, command_name: str, session_id: Optional[str]) -> Iterator[None]:
        try:
            yield
        except BattlemaniaError as e:
            self.event_manager.publish(
                CommandRejected(
                    turn=self._turn_of(session_id),
                    session_id=session_id,
                    command_name=command_name,
                    error_code=e.code,
                    message=str(e),
                ),
                priority=EventPriority.HIGH,
                source="SessionManager"
            )
            self._emit_log(f"Rejected {command_name}: {e}", "WARNING", "WARNING")
            self._flush_events()
            raise

    def _turn_of(self, session_id: Optional[str]) -> int:
        if session_id is None:
            return 0
        with self._registry_lock:
            session = self._sessions.get(session_id)
        return session.current_turn if session else 0

    def _publish_selection(self, session: Session, combatant_id: str) -> None:
        combatant = session.get_combatant(combatant_id)
        self.event_manager.publish(
            SelectionChanged(
                turn=session.current_turn,
                session_id=session.id,
                combatant_id=combatant_id,
                ammunition_id=combatant.selected_ammunition.item_id,
                wall_id=combatant.selected_wall.item_id,
            ),
            source="SessionManager"
        )

    def _publish_turn(
        self,
        session_id: str,
        record: TurnRecord,
        remaining: dict[str, int],
        result: TurnResult
    ) -> None:
        turn = record.turn_number
        for report in record.damages:
            self.event_manager.publish(
                CombatantDamaged(
                    turn=turn,
                    session_id=session_id,
                    report=report,
                    remaining_health=remaining[report.to_combatant],
                ),
                source="SessionManager"
            )
            self._emit_log(
                f"{report.from_combatant} → {report.to_combatant} "
                f"({report.damage} damage, {report.ammunition_id or 'no attack'}, "
                f"blocked {report.defended_by})",
                "BATTLE"
            )
        self.event_manager.publish(
            TurnResolved(turn=turn, session_id=session_id, record=record),
            source="SessionManager"
        )
        self._emit_log(f"Turn {turn} completed for session {session_id}", "BATTLE")

        if result.end_result is not None:
            self._publish_end(result.end_result, turn + 1)
        self._flush_events()

    def _publish_end(self, result: EndResult, turn: int) -> None:
        self.event_manager.publish(
            SessionEnded(turn=turn, session_id=result.session_id,
                         winner=result.winner, reason=result.reason),
            source="SessionManager"
        )
        self._emit_log(
            f"Session {result.session_id} ended ({END_REASON_NAMES[result.reason]}). Winner: {result.winner}",
            "SESSION"
        )

    def _emit_log(self, message: str, category: str = "SYSTEM", level: str = "INFO") -> None:
        self.event_manager.publish(
            LogMessage(turn=0, message=message, category=category, level=level, source="SessionManager"),
            source="SessionManager"
        )

    def _flush_events(self) -> None:
        self.event_manager.process_events()
