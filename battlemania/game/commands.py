"""
Typed commands accepted by the session manager.

Each operation a transport layer can request is one concrete command class;
:meth:`SessionManager.dispatch` only accepts instances of :class:`Command`,
so an unrecognized operation cannot reach the engine.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from ..core.data.catalog import SelectionLike
from ..core.engine.session import CombatantConfig, TurnAction
from .session_lifecycle import CONFIG_DEFAULT

if TYPE_CHECKING:
    from .session_manager import SessionManager


class Command(ABC):
    """Abstract base class for all session commands."""

    @abstractmethod
    def execute(self, manager: "SessionManager") -> Any:
        """
        Execute the command.

        Args:
            manager: The session manager that owns the targeted session

        Returns:
            Whatever the corresponding manager operation returns
        """


@dataclass(frozen=True)
class StartSession(Command):
    combatants: tuple[CombatantConfig, ...]
    turn_limit: Optional[int] = CONFIG_DEFAULT
    session_id: Optional[str] = None

    def execute(self, manager: "SessionManager") -> str:
        return manager.start(self.combatants, turn_limit=self.turn_limit, session_id=self.session_id)


@dataclass(frozen=True)
class PlayTurn(Command):
    session_id: str
    turn_number: int
    actions: tuple[TurnAction, ...] = field(default_factory=tuple)

    def execute(self, manager: "SessionManager"):
        return manager.play_turn(self.session_id, self.turn_number, self.actions)


@dataclass(frozen=True)
class PlaySelectedTurn(Command):
    """Play the next turn from the combatants' staged selections."""
    session_id: str

    def execute(self, manager: "SessionManager"):
        return manager.play_selected_turn(self.session_id)


@dataclass(frozen=True)
class EndSession(Command):
    session_id: str

    def execute(self, manager: "SessionManager"):
        return manager.end(self.session_id)


@dataclass(frozen=True)
class PauseSession(Command):
    session_id: str

    def execute(self, manager: "SessionManager") -> None:
        manager.pause(self.session_id)


@dataclass(frozen=True)
class ResumeSession(Command):
    session_id: str

    def execute(self, manager: "SessionManager") -> None:
        manager.resume(self.session_id)


@dataclass(frozen=True)
class SelectAmmunition(Command):
    session_id: str
    combatant_id: str
    ammunition: SelectionLike = None

    def execute(self, manager: "SessionManager") -> None:
        manager.select_ammunition(self.session_id, self.combatant_id, self.ammunition)


@dataclass(frozen=True)
class SelectWall(Command):
    session_id: str
    combatant_id: str
    wall: SelectionLike = None

    def execute(self, manager: "SessionManager") -> None:
        manager.select_wall(self.session_id, self.combatant_id, self.wall)
