"""
Engine configuration.

Starting values for combatants, the automatic turn limit, the catalog to load
and log buffer settings are read from a YAML file. Every key is optional and
falls back to the defaults of :class:`GameConfig`; unknown keys and values of
the wrong type are rejected so typos do not silently change the rules.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..core.data.catalog import DEFAULT_CATALOG_PATH, PACKAGE_ROOT, Catalog, get_catalog
from ..core.errors import ConfigLoadError

DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "assets" / "config" / "game_config.yaml"

# section -> key -> GameConfig field
_SCHEMA: dict[str, dict[str, str]] = {
    'combatants': {
        'initial_health': 'initial_health',
        'initial_points': 'initial_points',
    },
    'session': {
        'turn_limit': 'turn_limit',
    },
    'catalog': {
        'path': 'catalog_path',
    },
    'logging': {
        'max_messages': 'max_log_messages',
        'debug': 'debug_logging',
    },
}


@dataclass(frozen=True)
class GameConfig:
    """Tunable engine parameters."""

    initial_health: int = 100
    initial_points: int = 100
    turn_limit: Optional[int] = 10  # None disables the automatic turn limit
    catalog_path: Path = field(default=DEFAULT_CATALOG_PATH)
    max_log_messages: int = 1000
    debug_logging: bool = False

    def __post_init__(self):
        if not _is_int(self.initial_health) or self.initial_health < 1:
            raise ConfigLoadError(f"initial_health must be a positive integer, got {self.initial_health!r}")
        if not _is_int(self.initial_points) or self.initial_points < 0:
            raise ConfigLoadError(f"initial_points must be a non-negative integer, got {self.initial_points!r}")
        if self.turn_limit is not None and (not _is_int(self.turn_limit) or self.turn_limit < 1):
            raise ConfigLoadError(f"turn_limit must be a positive integer or null, got {self.turn_limit!r}")
        if not _is_int(self.max_log_messages) or self.max_log_messages < 1:
            raise ConfigLoadError(f"max_messages must be a positive integer, got {self.max_log_messages!r}")
        if not isinstance(self.debug_logging, bool):
            raise ConfigLoadError(f"debug must be true or false, got {self.debug_logging!r}")
        object.__setattr__(self, 'catalog_path', Path(self.catalog_path))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "GameConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the config file

        Returns:
            GameConfig with file values applied over the defaults

        Raises:
            ConfigLoadError: If the file is missing, unreadable or has unknown keys
        """
        config_path = Path(path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigLoadError("Config file not found", str(config_path))
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML: {e}", str(config_path))

        if not isinstance(data, dict):
            raise ConfigLoadError("Expected a mapping at the top level", str(config_path))

        values: dict[str, Any] = {}
        for section_name, section in data.items():
            keys = _SCHEMA.get(section_name)
            if keys is None:
                raise ConfigLoadError(f"Unknown config section '{section_name}'", str(config_path))
            if not isinstance(section, dict):
                raise ConfigLoadError(f"Section '{section_name}' must be a mapping", str(config_path))
            for key, value in section.items():
                if key not in keys:
                    raise ConfigLoadError(f"Unknown key '{section_name}.{key}'", str(config_path))
                values[keys[key]] = value

        if 'catalog_path' in values:
            catalog_path = Path(values['catalog_path'])
            if not catalog_path.is_absolute():
                catalog_path = PACKAGE_ROOT / catalog_path
            values['catalog_path'] = catalog_path

        return cls(**values)

    @classmethod
    def load_default(cls) -> "GameConfig":
        """Load the configuration bundled with the package."""
        return cls.from_yaml(DEFAULT_CONFIG_PATH)

    def load_catalog(self) -> Catalog:
        """Catalog named by this config; the bundled one is shared process-wide."""
        if self.catalog_path.resolve() == DEFAULT_CATALOG_PATH.resolve():
            return get_catalog()
        return Catalog.from_yaml(self.catalog_path)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
