"""District zoning: circular districts with zone-specific generation rules."""

import math
from enum import Enum
from types import MappingProxyType
from typing import Mapping

import numpy as np
import structlog
from pydantic import BaseModel

from .exceptions import ConfigurationError, FrozenStructureError
from .terrain.heightfield import HeightfieldGenerator
from .terrain.noise import NoiseChannel, NoiseSource, to_unit
from .terrain_types import TerrainClass
from .types import Point2D, Point3D

logger = structlog.get_logger()

# Sub-stream of the world seed used for district layout.
_LAYOUT_STREAM = 23

# Steepest slope a building may sit on.
BUILDING_MAX_SLOPE = 0.3

# Share of the radius over which influence fades to zero.
INFLUENCE_FADE = 0.5

# Height reduction applied to buildings at a district edge.
EDGE_HEIGHT_REDUCTION = 0.3


class ZoneType(str, Enum):
    """District zone types."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    RURAL = "rural"
    PARK = "park"


class RoofStyle(str, Enum):
    PITCHED = "pitched"
    FLAT = "flat"


class ZoneParams(BaseModel, frozen=True):
    """Generation parameters shared by every district of a zone type."""

    name: str
    color: str
    building_density: float
    building_height: tuple[float, float]
    tree_density: float
    decoration_density: float
    roof_style: RoofStyle
    primary_color: str
    secondary_color: str
    description: str
    tree_kinds: tuple[str, ...]
    decoration_kinds: tuple[str, ...]


ZONE_PARAMS: Mapping[ZoneType, ZoneParams] = MappingProxyType({
    ZoneType.RESIDENTIAL: ZoneParams(
        name="Residential District",
        color="#4daf7c",
        building_density=0.7,
        building_height=(1.5, 3.0),
        tree_density=0.4,
        decoration_density=0.5,
        roof_style=RoofStyle.PITCHED,
        primary_color="#f6bd60",
        secondary_color="#f7ede2",
        description="A peaceful neighborhood with homes and gardens",
        tree_kinds=("oak", "maple", "cherry"),
        decoration_kinds=("mailbox", "garden", "bench", "lamppost", "flower"),
    ),
    ZoneType.COMMERCIAL: ZoneParams(
        name="Commercial District",
        color="#84a59d",
        building_density=0.9,
        building_height=(3.0, 5.0),
        tree_density=0.2,
        decoration_density=0.8,
        roof_style=RoofStyle.FLAT,
        primary_color="#f28482",
        secondary_color="#f5cac3",
        description="Busy area with shops and businesses",
        tree_kinds=("oak", "decorative"),
        decoration_kinds=("sign", "trash", "lamppost", "bench"),
    ),
    ZoneType.RURAL: ZoneParams(
        name="Rural District",
        color="#f6d186",
        building_density=0.3,
        building_height=(1.0, 2.0),
        tree_density=0.6,
        decoration_density=0.3,
        roof_style=RoofStyle.PITCHED,
        primary_color="#b5838d",
        secondary_color="#e5989b",
        description="Countryside with farms and wide open spaces",
        tree_kinds=("pine", "oak", "maple"),
        decoration_kinds=("fence", "well", "hay", "rock"),
    ),
    ZoneType.PARK: ZoneParams(
        name="Park District",
        color="#42a5f5",
        building_density=0.1,
        building_height=(1.0, 1.5),
        tree_density=0.8,
        decoration_density=0.6,
        roof_style=RoofStyle.PITCHED,
        primary_color="#caffbf",
        secondary_color="#9bf6ff",
        description="Natural area with trees, ponds, and walking paths",
        tree_kinds=("oak", "maple", "pine", "cherry", "willow"),
        decoration_kinds=("bench", "flower", "bush", "rock", "lamppost"),
    ),
})

# Peripheral districts cycle through zone types in this order.
_PERIPHERAL_ORDER = (
    ZoneType.RESIDENTIAL,
    ZoneType.COMMERCIAL,
    ZoneType.RURAL,
    ZoneType.PARK,
)


class District(BaseModel, frozen=True):
    """A circular region imposing zone rules on the area it covers."""

    id: str
    zone_type: ZoneType
    center: Point2D
    radius: float
    importance: float = 0.5
    elevation: float = 0.0

    @property
    def params(self) -> ZoneParams:
        return ZONE_PARAMS[self.zone_type]

    @property
    def position(self) -> Point3D:
        """Center snapped to the terrain surface."""
        return Point3D(x=self.center.x, y=self.elevation, z=self.center.z)

    def distance_to(self, point: Point2D | Point3D) -> float:
        return math.hypot(point.x - self.center.x, point.z - self.center.z)

    def contains(self, point: Point2D | Point3D) -> bool:
        return self.distance_to(point) <= self.radius


class BuildingParams(BaseModel, frozen=True):
    """Dimensions and styling for a building at a position."""

    height: float
    width: float
    depth: float
    roof_height: float
    roof_style: RoofStyle
    primary_color: str
    secondary_color: str
    window_ratio: float
    district_id: str


class DecorationParams(BaseModel, frozen=True):
    """Decoration choice for a position."""

    kind: str
    scale: float
    rotation: float
    district_id: str


class ZoneManager:
    """Owns the district list and answers zoning queries.

    Every point has an effective district: the first district whose
    radius contains it, or else the district with the nearest center.
    """

    def __init__(
        self,
        heightfield: HeightfieldGenerator,
        district_count: int = 4,
        *,
        seed: int | None = None,
        auto_initialize: bool = True,
        noise: NoiseSource | None = None,
    ) -> None:
        if district_count < 0:
            raise ConfigurationError(
                f"district_count must be non-negative, got {district_count}"
            )
        self.heightfield = heightfield
        self.district_count = district_count
        seed = heightfield.seed if seed is None else seed
        self._rng = np.random.default_rng([seed, _LAYOUT_STREAM])
        self._noise = noise if noise is not None else heightfield.noise
        self._districts: list[District] = []
        self._frozen = False

        if auto_initialize:
            self.initialize_default_districts()

    @property
    def districts(self) -> tuple[District, ...]:
        return tuple(self._districts)

    @property
    def central_district(self) -> District | None:
        return self._districts[0] if self._districts else None

    @property
    def peripheral_districts(self) -> tuple[District, ...]:
        return tuple(self._districts[1:])

    def initialize_default_districts(self) -> None:
        """Create the central commercial district and the peripheral ring."""
        size = self.heightfield.size

        self.create_district(
            ZoneType.COMMERCIAL,
            Point2D(x=0.0, z=0.0),
            radius=size * 0.1,
            importance=1.0,
        )

        distance = size * 0.25
        for i in range(self.district_count):
            angle = (i / self.district_count) * math.pi * 2
            center = Point2D(
                x=math.cos(angle) * distance * (0.8 + self._rng.random() * 0.4),
                z=math.sin(angle) * distance * (0.8 + self._rng.random() * 0.4),
            )
            self.create_district(
                _PERIPHERAL_ORDER[i % len(_PERIPHERAL_ORDER)],
                center,
                radius=size * (0.1 + self._rng.random() * 0.05),
                importance=0.7 + self._rng.random() * 0.3,
            )

        logger.info(
            "districts_initialized",
            count=len(self._districts),
            zone_types=[d.zone_type.value for d in self._districts],
        )

    def create_district(
        self,
        zone_type: ZoneType,
        center: Point2D,
        radius: float,
        importance: float = 0.5,
    ) -> District:
        """Register a new district with its center snapped to the terrain.

        Raises:
            ConfigurationError: If radius or importance is out of range.
            FrozenStructureError: If the manager has been frozen.
        """
        if self._frozen:
            raise FrozenStructureError("Cannot add districts after the world is built")
        if radius <= 0:
            raise ConfigurationError(f"District radius must be positive, got {radius}")
        if not 0.0 <= importance <= 1.0:
            raise ConfigurationError(f"District importance must be in [0, 1], got {importance}")

        district = District(
            id=f"district_{len(self._districts)}",
            zone_type=zone_type,
            center=center,
            elevation=self.heightfield.height_at(center.x, center.z),
            radius=radius,
            importance=importance,
        )
        self._districts.append(district)
        return district

    def freeze(self) -> None:
        """Close district registration."""
        self._frozen = True

    def district_at(self, point: Point2D | Point3D) -> District:
        """Effective district at a point.

        Raises:
            ConfigurationError: If no districts exist.
        """
        for district in self._districts:
            if district.contains(point):
                return district
        return self.nearest_district(point)

    def nearest_district(self, point: Point2D | Point3D) -> District:
        """District whose center is closest to the point.

        Raises:
            ConfigurationError: If no districts exist.
        """
        if not self._districts:
            raise ConfigurationError("No districts have been created")
        return min(self._districts, key=lambda d: d.distance_to(point))

    def influence_at(self, district: District, point: Point2D | Point3D) -> float:
        """Blend weight of a district at a point.

        1.0 inside the radius, fading linearly to 0.0 at 1.5x the radius.
        """
        distance = district.distance_to(point)
        if distance <= district.radius:
            return 1.0

        fade = district.radius * INFLUENCE_FADE
        if distance >= district.radius + fade:
            return 0.0
        return 1.0 - (distance - district.radius) / fade

    def clustering_value(self, x: float, z: float) -> float:
        """Smooth [0, 1] field used to cluster placements."""
        return to_unit(self._noise.noise2(NoiseChannel.ZONING, x, z))

    def building_params_at(
        self, point: Point2D | Point3D, rng: np.random.Generator
    ) -> BuildingParams:
        """Building dimensions and styling for a position.

        Buildings shrink toward district edges and get a +-10% jitter.
        """
        district = self.district_at(point)
        params = district.params
        low, high = params.building_height

        height = low + (high - low) * rng.random()
        width = 2 + rng.random() * 1.5
        depth = 2 + rng.random() * 1.5
        roof_height = 1 + rng.random() * 0.5
        window_ratio = 0.3 + rng.random() * 0.5

        distance_ratio = min(district.distance_to(point) / district.radius, 1.0)
        height *= 1 - distance_ratio * EDGE_HEIGHT_REDUCTION

        height *= 0.9 + rng.random() * 0.2
        width *= 0.9 + rng.random() * 0.2
        depth *= 0.9 + rng.random() * 0.2

        return BuildingParams(
            height=height,
            width=width,
            depth=depth,
            roof_height=roof_height,
            roof_style=params.roof_style,
            primary_color=params.primary_color,
            secondary_color=params.secondary_color,
            window_ratio=window_ratio,
            district_id=district.id,
        )

    def should_place_building_at(self, point: Point2D | Point3D) -> bool:
        """Whether a building belongs at this point."""
        district = self.district_at(point)

        terrain_class = self.heightfield.terrain_class_at(point.x, point.z)
        if not terrain_class.buildable:
            return False

        if self.heightfield.slope_at(point.x, point.z) > BUILDING_MAX_SLOPE:
            return False

        threshold = 1 - district.params.building_density
        return self.clustering_value(point.x * 0.05, point.z * 0.05) > threshold

    def should_place_tree_at(self, point: Point2D | Point3D) -> bool:
        """Whether a tree belongs at this point."""
        district = self.district_at(point)

        terrain_class = self.heightfield.terrain_class_at(point.x, point.z)
        if terrain_class is TerrainClass.WATER:
            return False

        threshold = 1 - district.params.tree_density
        return self.clustering_value(point.x * 0.1, point.z * 0.1) > threshold

    def decoration_params_at(
        self, point: Point2D | Point3D, rng: np.random.Generator
    ) -> DecorationParams:
        """Decoration kind, scale and rotation from the district catalog."""
        district = self.district_at(point)
        kinds = district.params.decoration_kinds
        return DecorationParams(
            kind=kinds[int(rng.integers(len(kinds)))],
            scale=0.8 + rng.random() * 0.4,
            rotation=rng.random() * math.pi * 2,
            district_id=district.id,
        )

    def tree_type_at(self, point: Point2D | Point3D, rng: np.random.Generator) -> str:
        """Tree kind drawn from the district catalog."""
        kinds = self.district_at(point).params.tree_kinds
        return kinds[int(rng.integers(len(kinds)))]
