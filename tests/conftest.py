"""
Shared fixtures for the battlemania test suite.

Provides the bundled catalog, a deterministic config, lifecycle and manager
instances and a fresh two-combatant session.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from battlemania.core.data.catalog import Catalog, DEFAULT_CATALOG_PATH
from battlemania.core.engine.session import CombatantConfig
from battlemania.core.events import EventManager
from battlemania.game.config import GameConfig
from battlemania.game.session_lifecycle import SessionLifecycle
from battlemania.game.session_manager import SessionManager


@pytest.fixture
def catalog():
    """The catalog bundled with the package."""
    return Catalog.from_yaml(DEFAULT_CATALOG_PATH)


@pytest.fixture
def config():
    """Engine config with the source game's defaults."""
    return GameConfig(initial_health=100, initial_points=100, turn_limit=10)


@pytest.fixture
def event_manager():
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def lifecycle(catalog, config):
    return SessionLifecycle(catalog, config)


@pytest.fixture
def session(lifecycle):
    """Fresh session: X and Y with 100 health and 50 points each."""
    return lifecycle.start(
        [CombatantConfig("X", health=100, points=50), CombatantConfig("Y", health=100, points=50)],
        session_id="GAME_TEST",
    )


@pytest.fixture
def manager(catalog, config, event_manager):
    return SessionManager(config=config, catalog=catalog, event_manager=event_manager)
