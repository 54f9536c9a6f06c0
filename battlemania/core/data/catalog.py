"""Item catalog for ammunition and walls.

Catalog entries are loaded from a YAML file once and never change afterwards.
Lookups are pure: an unknown id yields ``None`` from the ``lookup_*`` methods,
while the ``resolve_*`` methods turn a :class:`Selection` into an item and
raise for ids that are not in the catalog. "No selection" is a value of its
own and is never treated as an unknown id.
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Optional, Union

import yaml

from ..errors import CatalogLoadError, UnknownAmmunition, UnknownWall

PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CATALOG_PATH = PACKAGE_ROOT / "assets" / "data" / "catalog.yaml"


@dataclass(frozen=True)
class Ammunition:
    """An attack item: deals ``damage`` and costs ``cost`` points per use."""
    id: str
    name: str
    damage: int
    cost: int
    icon: str = ""


@dataclass(frozen=True)
class Wall:
    """A defense item: absorbs up to ``defense`` damage for ``cost`` points."""
    id: str
    name: str
    defense: int
    cost: int
    icon: str = ""


@dataclass(frozen=True)
class Selection:
    """A combatant's choice for one item slot.

    Either nothing (``NO_SELECTION``) or a catalog id. Whether the id actually
    exists is only decided when the selection is resolved against a catalog.
    """
    item_id: Optional[str] = None

    @classmethod
    def item(cls, item_id: str) -> "Selection":
        """Create a selection naming a catalog item.

        Any id is accepted here, even an empty one; an id the catalog does
        not know is rejected when the selection is resolved.
        """
        return cls(item_id=item_id if isinstance(item_id, str) else str(item_id))

    @classmethod
    def from_id(cls, item_id: Optional[str]) -> "Selection":
        """Convert a nullable id coming from the outside world."""
        if item_id is None:
            return NO_SELECTION
        return cls.item(item_id)

    @property
    def is_empty(self) -> bool:
        return self.item_id is None

    def __str__(self) -> str:
        return self.item_id if self.item_id is not None else "-"


NO_SELECTION = Selection()

SelectionLike = Union[Selection, str, None]


def as_selection(value: SelectionLike) -> Selection:
    """Accept a Selection, a bare id or None and return a Selection."""
    if isinstance(value, Selection):
        return value
    return Selection.from_id(value)


class Catalog:
    """Immutable, ordered table of ammunition and walls."""

    def __init__(self, ammunition: Iterable[Ammunition], walls: Iterable[Wall]):
        ammo_table: dict[str, Ammunition] = {}
        for ammo in ammunition:
            if ammo.id in ammo_table:
                raise CatalogLoadError(f"Duplicate ammunition id: {ammo.id}")
            ammo_table[ammo.id] = ammo

        wall_table: dict[str, Wall] = {}
        for wall in walls:
            if wall.id in wall_table:
                raise CatalogLoadError(f"Duplicate wall id: {wall.id}")
            wall_table[wall.id] = wall

        self._ammunition = MappingProxyType(ammo_table)
        self._walls = MappingProxyType(wall_table)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Catalog":
        """Load a catalog from a YAML file.

        Args:
            path: Path to a file with top-level ``ammunition`` and ``walls`` maps

        Returns:
            The loaded catalog

        Raises:
            CatalogLoadError: If the file is missing or does not match the schema
        """
        catalog_path = Path(path)
        try:
            with open(catalog_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise CatalogLoadError(f"Catalog file not found: {catalog_path}")
        except yaml.YAMLError as e:
            raise CatalogLoadError(f"Invalid YAML in {catalog_path}: {e}")

        if not isinstance(data, dict):
            raise CatalogLoadError(f"Expected a mapping at the top of {catalog_path}")

        ammunition = [
            Ammunition(
                id=item_id,
                name=_require_str(entry, "name", item_id),
                damage=_require_non_negative_int(entry, "damage", item_id),
                cost=_require_non_negative_int(entry, "cost", item_id),
                icon=str(entry.get("icon", "")),
            )
            for item_id, entry in _require_section(data, "ammunition", catalog_path)
        ]
        walls = [
            Wall(
                id=item_id,
                name=_require_str(entry, "name", item_id),
                defense=_require_non_negative_int(entry, "defense", item_id),
                cost=_require_non_negative_int(entry, "cost", item_id),
                icon=str(entry.get("icon", "")),
            )
            for item_id, entry in _require_section(data, "walls", catalog_path)
        ]
        return cls(ammunition, walls)

    def lookup_ammunition(self, ammunition_id: str) -> Optional[Ammunition]:
        return self._ammunition.get(ammunition_id)

    def lookup_wall(self, wall_id: str) -> Optional[Wall]:
        return self._walls.get(wall_id)

    def all_ammunition(self) -> list[Ammunition]:
        """All ammunition in catalog order."""
        return list(self._ammunition.values())

    def all_walls(self) -> list[Wall]:
        """All walls in catalog order."""
        return list(self._walls.values())

    def resolve_ammunition(self, selection: Selection) -> Optional[Ammunition]:
        """Resolve an ammunition selection.

        Returns:
            None for an empty selection, otherwise the catalog entry

        Raises:
            UnknownAmmunition: If the selected id is not in the catalog
        """
        if selection.is_empty:
            return None
        ammo = self._ammunition.get(selection.item_id)
        if ammo is None:
            raise UnknownAmmunition(selection.item_id)
        return ammo

    def resolve_wall(self, selection: Selection) -> Optional[Wall]:
        """Resolve a wall selection; see :meth:`resolve_ammunition`."""
        if selection.is_empty:
            return None
        wall = self._walls.get(selection.item_id)
        if wall is None:
            raise UnknownWall(selection.item_id)
        return wall

    def selection_cost(self, ammunition: Selection, wall: Selection) -> int:
        """Total point cost of an ammunition and wall pair."""
        ammo = self.resolve_ammunition(ammunition)
        wall_item = self.resolve_wall(wall)
        return (ammo.cost if ammo else 0) + (wall_item.cost if wall_item else 0)

    def __len__(self) -> int:
        return len(self._ammunition) + len(self._walls)


def _require_section(data: dict, key: str, path: Path) -> list[tuple[str, dict[str, Any]]]:
    section = data.get(key)
    if not isinstance(section, dict):
        raise CatalogLoadError(f"Missing '{key}' section in {path}")
    entries = []
    for item_id, entry in section.items():
        if not isinstance(item_id, str) or not isinstance(entry, dict):
            raise CatalogLoadError(f"Invalid {key} entry '{item_id}' in {path}")
        entries.append((item_id, entry))
    return entries


def _require_str(entry: dict[str, Any], field: str, item_id: str) -> str:
    value = entry.get(field)
    if not isinstance(value, str):
        raise CatalogLoadError(f"Item '{item_id}' field '{field}' must be a string")
    return value


def _require_non_negative_int(entry: dict[str, Any], field: str, item_id: str) -> int:
    value = entry.get(field)
    # bool is an int subclass and never a valid amount
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CatalogLoadError(
            f"Item '{item_id}' field '{field}' must be a non-negative integer"
        )
    return value


_default_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """Return the process-wide catalog, loading it on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = Catalog.from_yaml(DEFAULT_CATALOG_PATH)
    return _default_catalog
