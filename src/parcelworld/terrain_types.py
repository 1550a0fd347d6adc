"""Terrain classes and their placement properties."""

from enum import Enum


class TerrainClass(str, Enum):
    """Surface classes derived from height and moisture."""

    WATER = "water"
    BEACH = "beach"
    GRASS = "grass"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    SNOW = "snow"

    @property
    def is_water(self) -> bool:
        """Whether the surface is under water."""
        return self is TerrainClass.WATER

    @property
    def buildable(self) -> bool:
        """Whether buildings and landmark sites may sit on this class."""
        return self not in _UNBUILDABLE_CLASSES

    @property
    def index(self) -> int:
        """Compact integer code used in classified grids."""
        return _CLASS_INDEX[self]

    @classmethod
    def from_index(cls, value: int) -> "TerrainClass":
        """Inverse of ``index``."""
        return _INDEX_CLASS[value]


_UNBUILDABLE_CLASSES = frozenset({
    TerrainClass.WATER,
    TerrainClass.BEACH,
})

_CLASS_INDEX: dict[TerrainClass, int] = {
    terrain_class: i for i, terrain_class in enumerate(TerrainClass)
}
_INDEX_CLASS: dict[int, TerrainClass] = {i: c for c, i in _CLASS_INDEX.items()}
