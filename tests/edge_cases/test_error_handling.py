"""
Edge-case tests for the error taxonomy.

Every engine error must be catchable as BattlemaniaError and carry a
distinct, stable code for presentation layers.
"""

import pytest

from battlemania.core import errors
from battlemania.core.errors import (
    BattlemaniaError,
    CatalogLoadError,
    ConfigLoadError,
    InsufficientPoints,
    InvalidConfiguration,
    InvalidTurnComposition,
    SessionNotFound,
    StaleSession,
    TurnNumberMismatch,
    UnknownAmmunition,
    UnknownWall,
)


ALL_ERRORS = [
    InvalidConfiguration("bad"),
    InvalidTurnComposition("bad"),
    UnknownAmmunition("AMMO_99"),
    UnknownWall("WALL_99"),
    TurnNumberMismatch("GAME_1", 3, 4),
    StaleSession("GAME_1", "COMPLETED"),
    InsufficientPoints("X", 60, 50),
    SessionNotFound("GAME_1"),
    CatalogLoadError("bad"),
    ConfigLoadError("bad", "config.yaml"),
]


class TestErrorTaxonomy:
    """Test the shared properties of engine errors."""

    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_is_engine_error(self, error):
        assert isinstance(error, BattlemaniaError)
        assert error.code != BattlemaniaError.code

    def test_codes_are_distinct(self):
        codes = [error.code for error in ALL_ERRORS]

        assert len(set(codes)) == len(codes)

    def test_every_error_class_is_covered(self):
        defined = {
            obj for obj in vars(errors).values()
            if isinstance(obj, type) and issubclass(obj, BattlemaniaError) and obj is not BattlemaniaError
        }

        assert defined == {type(error) for error in ALL_ERRORS}

    def test_messages_name_the_offender(self):
        assert "AMMO_99" in str(UnknownAmmunition("AMMO_99"))
        assert "WALL_99" in str(UnknownWall("WALL_99"))
        assert "needs 60 points but has 50" in str(InsufficientPoints("X", 60, 50))
        assert "expects turn 3, got turn 4" in str(TurnNumberMismatch("GAME_1", 3, 4))
        assert "config.yaml" in str(ConfigLoadError("bad", "config.yaml"))

    def test_stale_session_names_operation(self):
        error = StaleSession("GAME_1", "PAUSED", "pause")

        assert str(error) == "Cannot pause in session GAME_1 (status PAUSED)"
