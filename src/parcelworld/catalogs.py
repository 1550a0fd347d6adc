"""Archetype tables for scattered environment elements.

All tables are read-only mappings of frozen records, created once at
import time.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel


class CrownShape(str, Enum):
    CONE = "cone"
    SPHERE = "sphere"
    WEEPING = "weeping"


class RockShape(str, Enum):
    ANGULAR = "angular"
    SMOOTH = "smooth"


class PlantShape(str, Enum):
    FLOWER = "flower"
    BUSH = "bush"
    GRASS = "grass"


class TreeArchetype(BaseModel, frozen=True):
    trunk_color: str
    leaves_color: str
    trunk_height: tuple[float, float]
    trunk_radius: tuple[float, float]
    leaves_radius: tuple[float, float]
    shape: CrownShape


class RockArchetype(BaseModel, frozen=True):
    color: str
    size: tuple[float, float]
    shape: RockShape


class PlantArchetype(BaseModel, frozen=True):
    color: str
    size: tuple[float, float]
    shape: PlantShape


class DecorationArchetype(BaseModel, frozen=True):
    color: str
    size: float
    shape: str


TREE_TYPES: Mapping[str, TreeArchetype] = MappingProxyType({
    "pine": TreeArchetype(
        trunk_color="#8b4513",
        leaves_color="#2d6a4f",
        trunk_height=(2.0, 4.0),
        trunk_radius=(0.15, 0.3),
        leaves_radius=(1.2, 2.0),
        shape=CrownShape.CONE,
    ),
    "oak": TreeArchetype(
        trunk_color="#8b4513",
        leaves_color="#40916c",
        trunk_height=(1.5, 3.0),
        trunk_radius=(0.2, 0.4),
        leaves_radius=(1.5, 2.5),
        shape=CrownShape.SPHERE,
    ),
    "maple": TreeArchetype(
        trunk_color="#a0522d",
        leaves_color="#d8f3dc",
        trunk_height=(2.0, 3.5),
        trunk_radius=(0.15, 0.3),
        leaves_radius=(1.8, 2.8),
        shape=CrownShape.SPHERE,
    ),
    "cherry": TreeArchetype(
        trunk_color="#a0522d",
        leaves_color="#ffcfd2",
        trunk_height=(1.8, 2.8),
        trunk_radius=(0.15, 0.25),
        leaves_radius=(1.5, 2.2),
        shape=CrownShape.SPHERE,
    ),
    "willow": TreeArchetype(
        trunk_color="#8b4513",
        leaves_color="#95d5b2",
        trunk_height=(3.0, 4.5),
        trunk_radius=(0.2, 0.4),
        leaves_radius=(2.0, 3.0),
        shape=CrownShape.WEEPING,
    ),
    "decorative": TreeArchetype(
        trunk_color="#8b4513",
        leaves_color="#ff70a6",
        trunk_height=(1.5, 2.5),
        trunk_radius=(0.1, 0.2),
        leaves_radius=(1.0, 1.8),
        shape=CrownShape.SPHERE,
    ),
})

ROCK_TYPES: tuple[RockArchetype, ...] = (
    RockArchetype(color="#808080", size=(0.3, 1.2), shape=RockShape.ANGULAR),
    RockArchetype(color="#a9a9a9", size=(0.2, 0.9), shape=RockShape.SMOOTH),
    RockArchetype(color="#d3d3d3", size=(0.4, 1.5), shape=RockShape.ANGULAR),
    RockArchetype(color="#a52a2a", size=(0.3, 1.0), shape=RockShape.SMOOTH),
)

PLANT_TYPES: tuple[PlantArchetype, ...] = (
    PlantArchetype(color="#ff6347", size=(0.2, 0.4), shape=PlantShape.FLOWER),
    PlantArchetype(color="#ffd700", size=(0.2, 0.4), shape=PlantShape.FLOWER),
    PlantArchetype(color="#228b22", size=(0.5, 1.0), shape=PlantShape.BUSH),
    PlantArchetype(color="#7cfc00", size=(0.1, 0.3), shape=PlantShape.GRASS),
)

# Zone catalogs may name kinds missing here; the scatter pass skips those.
DECORATION_TYPES: Mapping[str, DecorationArchetype] = MappingProxyType({
    "mailbox": DecorationArchetype(color="#1e88e5", size=0.5, shape="mailbox"),
    "bench": DecorationArchetype(color="#8b4513", size=1.2, shape="bench"),
    "lamppost": DecorationArchetype(color="#212121", size=2.0, shape="lamppost"),
    "well": DecorationArchetype(color="#795548", size=1.0, shape="well"),
    "fence": DecorationArchetype(color="#a1887f", size=0.8, shape="fence"),
    "sign": DecorationArchetype(color="#ffeb3b", size=0.7, shape="sign"),
})
