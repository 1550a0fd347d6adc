"""Procedural world generation for a parcel delivery game."""

from .config import TerrainConfig, WorldConfig, find_config, load_config
from .exceptions import (
    ConfigurationError,
    DuplicateLocationError,
    FrozenStructureError,
    UnknownLocationError,
    WorldGenError,
)
from .routes import (
    PATH_CLEARANCE,
    Location,
    LocationKind,
    Node,
    NodeKind,
    PathConnection,
    PathHit,
    RoadClass,
    RouteNetwork,
    RoutePlan,
)
from .scatter import Decoration, Plant, Rock, ScatterEngine, ScatterResult, Tree
from .terrain import FlatSite, HeightfieldGenerator
from .terrain_types import TerrainClass
from .types import Point2D, Point3D
from .validation import ValidationResult, validate_world
from .world import WorldDescription, build_world
from .zones import District, ZoneManager, ZoneType

__all__ = [
    # Types
    "Point2D",
    "Point3D",
    "TerrainClass",
    # Config
    "TerrainConfig",
    "WorldConfig",
    "find_config",
    "load_config",
    # Heightfield
    "FlatSite",
    "HeightfieldGenerator",
    # Zones
    "District",
    "ZoneManager",
    "ZoneType",
    # Routes
    "PATH_CLEARANCE",
    "Location",
    "LocationKind",
    "Node",
    "NodeKind",
    "PathConnection",
    "PathHit",
    "RoadClass",
    "RouteNetwork",
    "RoutePlan",
    # Scatter
    "Decoration",
    "Plant",
    "Rock",
    "ScatterEngine",
    "ScatterResult",
    "Tree",
    # World
    "WorldDescription",
    "build_world",
    "ValidationResult",
    "validate_world",
    # Exceptions
    "WorldGenError",
    "ConfigurationError",
    "DuplicateLocationError",
    "FrozenStructureError",
    "UnknownLocationError",
]
