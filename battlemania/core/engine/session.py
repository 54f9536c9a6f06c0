"""Session data model.

A :class:`Session` is the full mutable state of one game: exactly two
combatants, a turn counter, a status and an append-only journal of
:class:`TurnRecord` entries. Combatants are told apart by their slot; the
opponent of a combatant is always the other slot.

The session only offers narrow mutation helpers (``append_turn``,
``complete``, ``set_status``) that guard its invariants. Deciding *whether*
a mutation is allowed is the job of the lifecycle layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..data.catalog import NO_SELECTION, Selection, SelectionLike, as_selection
from ..data.game_enums import EndReason, SessionStatus, Slot
from ..errors import InvalidConfiguration


@dataclass
class Combatant:
    """One of the two parties of a session."""

    id: str
    slot: Slot
    health: int
    points: int
    total_damage_dealt: int = 0
    selected_ammunition: Selection = NO_SELECTION
    selected_wall: Selection = NO_SELECTION

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def take_damage(self, damage: int) -> int:
        """Reduce health by ``damage``, never below zero.

        Returns:
            Health remaining after the hit
        """
        self.health = max(0, self.health - damage)
        return self.health

    def clear_selections(self) -> None:
        self.selected_ammunition = NO_SELECTION
        self.selected_wall = NO_SELECTION

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'slot': self.slot.name,
            'health': self.health,
            'points': self.points,
            'total_damage_dealt': self.total_damage_dealt,
            'selected_ammunition_id': self.selected_ammunition.item_id,
            'selected_wall_id': self.selected_wall.item_id,
        }


@dataclass(frozen=True)
class CombatantConfig:
    """Caller-supplied starting values for one combatant.

    ``health`` and ``points`` left as None are filled from the game config.
    """

    id: str
    health: Optional[int] = None
    points: Optional[int] = None


@dataclass(frozen=True)
class TurnAction:
    """One combatant's simultaneous choice for a turn.

    Ammunition and wall accept a :class:`Selection`, a bare catalog id or
    None; they are always stored as selections.
    """

    combatant_id: str
    ammunition: Selection = NO_SELECTION
    wall: Selection = NO_SELECTION

    def __post_init__(self):
        object.__setattr__(self, 'ammunition', as_selection(self.ammunition))
        object.__setattr__(self, 'wall', as_selection(self.wall))

    @classmethod
    def create(
        cls,
        combatant_id: str,
        ammunition: SelectionLike = None,
        wall: SelectionLike = None,
    ) -> TurnAction:
        return cls(combatant_id, ammunition, wall)

    def to_dict(self) -> dict[str, Any]:
        return {
            'combatant_id': self.combatant_id,
            'ammunition_id': self.ammunition.item_id,
            'wall_id': self.wall.item_id,
        }


@dataclass(frozen=True)
class DamageReport:
    """Damage dealt along one direction of a turn's exchange."""

    from_combatant: str
    to_combatant: str
    damage: int
    ammunition_id: Optional[str]
    defended_by: int

    def to_dict(self) -> dict[str, Any]:
        return {
            'from_combatant': self.from_combatant,
            'to_combatant': self.to_combatant,
            'damage': self.damage,
            'ammunition_id': self.ammunition_id,
            'defended_by': self.defended_by,
        }


@dataclass(frozen=True)
class TurnRecord:
    """Immutable journal entry for a committed turn."""

    turn_number: int
    actions: tuple[TurnAction, ...]
    damages: tuple[DamageReport, ...]
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            'turn_number': self.turn_number,
            'actions': [action.to_dict() for action in self.actions],
            'damages': [report.to_dict() for report in self.damages],
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class Session:
    """Mutable state of one game instance."""

    id: str
    combatants: tuple[Combatant, Combatant]
    status: SessionStatus = SessionStatus.ACTIVE
    current_turn: int = 1
    turn_limit: Optional[int] = None
    winner: Optional[str] = None
    end_reason: Optional[EndReason] = None
    created_at: datetime = field(default_factory=datetime.now)
    _history: list[TurnRecord] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if len(self.combatants) != 2:
            raise InvalidConfiguration(
                f"A session needs exactly two combatants, got {len(self.combatants)}"
            )
        first, second = self.combatants
        if first.id == second.id:
            raise InvalidConfiguration(f"Combatant ids must differ, got {first.id!r} twice")
        self.combatants = (first, second)

    @property
    def turn_history(self) -> tuple[TurnRecord, ...]:
        """Read-only view of the journal, oldest turn first."""
        return tuple(self._history)

    @property
    def combatant_ids(self) -> tuple[str, str]:
        return (self.combatants[0].id, self.combatants[1].id)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    @property
    def has_knockout(self) -> bool:
        return any(c.is_defeated for c in self.combatants)

    @property
    def turn_limit_exceeded(self) -> bool:
        return self.turn_limit is not None and self.current_turn > self.turn_limit

    def get_combatant(self, combatant_id: str) -> Optional[Combatant]:
        for combatant in self.combatants:
            if combatant.id == combatant_id:
                return combatant
        return None

    def get_by_slot(self, slot: Slot) -> Combatant:
        return self.combatants[slot.value]

    def opponent_of(self, combatant_id: str) -> Optional[Combatant]:
        combatant = self.get_combatant(combatant_id)
        if combatant is None:
            return None
        return self.get_by_slot(combatant.slot.opponent)

    def append_turn(self, record: TurnRecord) -> None:
        """Journal a committed turn and advance the turn counter."""
        if record.turn_number != self.current_turn:
            raise RuntimeError(
                f"turn {record.turn_number} appended while expecting {self.current_turn}"
            )
        self._history.append(record)
        self.current_turn += 1

    def set_status(self, status: SessionStatus) -> None:
        if self.status == SessionStatus.COMPLETED:
            raise RuntimeError("completed sessions are sealed")
        self.status = status

    def complete(self, winner: str, reason: EndReason) -> None:
        """Seal the session with its winner."""
        if self.status == SessionStatus.COMPLETED:
            raise RuntimeError("winner is already frozen")
        self.status = SessionStatus.COMPLETED
        self.winner = winner
        self.end_reason = reason

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the session for rendering and telemetry."""
        return {
            'id': self.id,
            'status': self.status.value,
            'current_turn': self.current_turn,
            'turn_limit': self.turn_limit,
            'winner': self.winner,
            'end_reason': self.end_reason.value if self.end_reason else None,
            'combatants': [c.to_dict() for c in self.combatants],
            'turn_history': [record.to_dict() for record in self._history],
        }
