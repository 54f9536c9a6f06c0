"""
Session lifecycle: creation, turn execution and termination.

:class:`SessionLifecycle` is the only code that mutates a :class:`Session`.
Every operation validates first and mutates second, so a rejected call
leaves the session exactly as it found it. Turn resolution itself is
delegated to :class:`TurnResolver`; this module commits its reports.

Termination follows a small state machine::

    ACTIVE <-> PAUSED
    ACTIVE/PAUSED -> COMPLETED   (explicit end, turn limit, knockout)

The winner is the combatant with the most health left, then the most damage
dealt; a full tie goes to the first-listed combatant.
"""
import time
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from ..core.data.catalog import Catalog, SelectionLike, as_selection
from ..core.data.game_enums import EndReason, SessionStatus, Slot
from ..core.engine.session import (
    Combatant,
    CombatantConfig,
    DamageReport,
    Session,
    TurnAction,
    TurnRecord,
)
from ..core.engine.turn_resolver import TurnResolver
from ..core.errors import (
    InsufficientPoints,
    InvalidConfiguration,
    InvalidTurnComposition,
    StaleSession,
    TurnNumberMismatch,
)
from .config import GameConfig


@dataclass(frozen=True)
class CombatantStats:
    """Final standing of one combatant."""
    combatant_id: str
    health: int
    points: int
    total_damage_dealt: int


@dataclass(frozen=True)
class EndResult:
    """Outcome of a completed session."""
    session_id: str
    winner: str
    reason: EndReason
    stats: tuple[CombatantStats, ...]


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one committed turn.

    ``end_result`` is set when the turn triggered automatic termination.
    """
    session_id: str
    turn_number: int
    damages: tuple[DamageReport, ...]
    end_result: Optional[EndResult] = None

    @property
    def session_ended(self) -> bool:
        return self.end_result is not None


ConfigLike = Union[CombatantConfig, str]

# Marks a turn limit left to the game config; None means no limit at all
CONFIG_DEFAULT: Any = object()


def generate_session_id() -> str:
    """Session ids look like ``GAME_<epoch millis>_<random suffix>``."""
    return f"GAME_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def determine_winner(combatants: Sequence[Combatant]) -> Combatant:
    """Pick the winner: most health, then most damage dealt, then listing order."""
    # sorted() is stable, so full ties keep the first-listed combatant first
    ranked = sorted(combatants, key=lambda c: (-c.health, -c.total_damage_dealt))
    return ranked[0]


class SessionLifecycle:
    """Creates, advances and retires sessions."""

    def __init__(self, catalog: Catalog, config: Optional[GameConfig] = None):
        self.catalog = catalog
        self.config = config or GameConfig()
        self.resolver = TurnResolver(catalog)

    def start(
        self,
        combatant_configs: Sequence[ConfigLike],
        session_id: Optional[str] = None,
        turn_limit: Optional[int] = CONFIG_DEFAULT
    ) -> Session:
        """
        Create a new ACTIVE session at turn 1 with an empty journal.

        Args:
            combatant_configs: Exactly two configs (or bare combatant ids)
            session_id: Id to use; generated when omitted
            turn_limit: Turns after which the session ends; None for no limit,
                the config's limit when omitted

        Returns:
            The new session

        Raises:
            InvalidConfiguration: If the configs do not describe two valid combatants
        """
        configs = [self._as_config(c) for c in combatant_configs]
        if len(configs) != 2:
            raise InvalidConfiguration(
                f"A session needs exactly two combatants, got {len(configs)}"
            )

        limit = self.config.turn_limit if turn_limit is CONFIG_DEFAULT else turn_limit
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise InvalidConfiguration(f"Turn limit must be a positive integer, got {limit!r}")

        combatants = tuple(
            self._create_combatant(config, slot) for config, slot in zip(configs, Slot)
        )
        # Session rejects duplicate ids
        return Session(
            id=session_id or generate_session_id(),
            combatants=combatants,
            turn_limit=limit,
        )

    def play_turn(
        self,
        session: Session,
        turn_number: int,
        actions: Sequence[TurnAction]
    ) -> TurnResult:
        """
        Resolve and commit one turn.

        The turn either fully commits (damage, point costs, journal entry,
        turn increment) or raises without changing the session.

        Args:
            session: Session to advance
            turn_number: Must equal ``session.current_turn``
            actions: One action per combatant, in submission order

        Returns:
            TurnResult with the damage reports in submission order

        Raises:
            StaleSession: If the session is not ACTIVE
            TurnNumberMismatch: If ``turn_number`` is not the expected turn
            InvalidTurnComposition: If the actions do not pair up the two combatants
            UnknownAmmunition: If an ammunition id is not in the catalog
            UnknownWall: If a wall id is not in the catalog
            InsufficientPoints: If a combatant cannot afford their selections
        """
        if session.status != SessionStatus.ACTIVE:
            raise StaleSession(session.id, session.status.value)
        if turn_number != session.current_turn:
            raise TurnNumberMismatch(session.id, session.current_turn, turn_number)

        actions = tuple(actions)
        reports = self.resolver.resolve(actions, session.combatant_ids)

        # Affordability is checked for both combatants before anything changes
        costs = {}
        for action in actions:
            combatant = session.get_combatant(action.combatant_id)
            cost = self.resolver.turn_cost(action)
            if cost > combatant.points:
                raise InsufficientPoints(combatant.id, cost, combatant.points)
            costs[combatant.id] = cost

        for report in reports:
            session.get_combatant(report.to_combatant).take_damage(report.damage)
            session.get_combatant(report.from_combatant).total_damage_dealt += report.damage

        for combatant in session.combatants:
            combatant.points -= costs[combatant.id]
            combatant.clear_selections()

        session.append_turn(TurnRecord(
            turn_number=turn_number,
            actions=actions,
            damages=tuple(reports),
        ))

        end_result = None
        if session.has_knockout:
            end_result = self.end(session, EndReason.KNOCKOUT)
        elif session.turn_limit_exceeded:
            end_result = self.end(session, EndReason.TURN_LIMIT)

        return TurnResult(
            session_id=session.id,
            turn_number=turn_number,
            damages=tuple(reports),
            end_result=end_result,
        )

    def end(self, session: Session, reason: EndReason = EndReason.EXPLICIT) -> EndResult:
        """
        Retire a session and freeze its winner.

        Calling this on a COMPLETED session returns the existing result; the
        winner is never re-selected.
        """
        if session.status != SessionStatus.COMPLETED:
            winner = determine_winner(session.combatants)
            session.complete(winner.id, reason)
        return self.build_end_result(session)

    @staticmethod
    def build_end_result(session: Session) -> EndResult:
        if session.winner is None or session.end_reason is None:
            raise RuntimeError(f"Session {session.id} has not ended")
        return EndResult(
            session_id=session.id,
            winner=session.winner,
            reason=session.end_reason,
            stats=tuple(
                CombatantStats(
                    combatant_id=c.id,
                    health=c.health,
                    points=c.points,
                    total_damage_dealt=c.total_damage_dealt,
                )
                for c in session.combatants
            ),
        )

    def pause(self, session: Session) -> None:
        if session.status != SessionStatus.ACTIVE:
            raise StaleSession(session.id, session.status.value, "pause")
        session.set_status(SessionStatus.PAUSED)

    def resume(self, session: Session) -> None:
        if session.status != SessionStatus.PAUSED:
            raise StaleSession(session.id, session.status.value, "resume")
        session.set_status(SessionStatus.ACTIVE)

    def select_ammunition(self, session: Session, combatant_id: str, ammunition: SelectionLike) -> None:
        """Stage a combatant's ammunition for the next turn."""
        combatant = self._staging_target(session, combatant_id)
        selection = as_selection(ammunition)
        self._check_affordable(combatant, selection, combatant.selected_wall)
        combatant.selected_ammunition = selection

    def select_wall(self, session: Session, combatant_id: str, wall: SelectionLike) -> None:
        """Stage a combatant's wall for the next turn."""
        combatant = self._staging_target(session, combatant_id)
        selection = as_selection(wall)
        self._check_affordable(combatant, combatant.selected_ammunition, selection)
        combatant.selected_wall = selection

    @staticmethod
    def actions_from_selections(session: Session) -> list[TurnAction]:
        """Build the turn's actions from what each combatant has staged."""
        return [
            TurnAction(c.id, c.selected_ammunition, c.selected_wall)
            for c in session.combatants
        ]

    def _staging_target(self, session: Session, combatant_id: str) -> Combatant:
        if session.status != SessionStatus.ACTIVE:
            raise StaleSession(session.id, session.status.value, "change selections")
        combatant = session.get_combatant(combatant_id)
        if combatant is None:
            raise InvalidTurnComposition(
                f"Combatant {combatant_id!r} is not part of session {session.id}"
            )
        return combatant

    def _check_affordable(self, combatant: Combatant, ammunition, wall) -> None:
        # Raises UnknownAmmunition / UnknownWall for ids outside the catalog
        cost = self.catalog.selection_cost(ammunition, wall)
        if cost > combatant.points:
            raise InsufficientPoints(combatant.id, cost, combatant.points)

    @staticmethod
    def _as_config(config: ConfigLike) -> CombatantConfig:
        if isinstance(config, CombatantConfig):
            return config
        if isinstance(config, str):
            return CombatantConfig(id=config)
        raise InvalidConfiguration(f"Unsupported combatant config: {config!r}")

    def _create_combatant(self, config: CombatantConfig, slot: Slot) -> Combatant:
        if not isinstance(config.id, str) or not config.id:
            raise InvalidConfiguration(f"Combatant id must be a non-empty string, got {config.id!r}")

        health = config.health if config.health is not None else self.config.initial_health
        points = config.points if config.points is not None else self.config.initial_points
        if isinstance(health, bool) or not isinstance(health, int) or health < 1:
            raise InvalidConfiguration(f"Combatant {config.id} needs positive health, got {health!r}")
        if isinstance(points, bool) or not isinstance(points, int) or points < 0:
            raise InvalidConfiguration(f"Combatant {config.id} needs non-negative points, got {points!r}")

        return Combatant(id=config.id, slot=slot, health=health, points=points)
