"""World build orchestration and the read-only world description."""

import time
from typing import Any, Mapping

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import WorldConfig, coerce_config
from .routes import Location, PathConnection, PathHit, RouteNetwork, RoutePlan
from .scatter import (
    Decoration,
    EnvironmentElement,
    Plant,
    Rock,
    ScatterEngine,
    ScatterResult,
    Tree,
)
from .terrain.heightfield import HeightfieldGenerator
from .terrain.noise import NoiseSource
from .terrain_types import TerrainClass
from .types import Point2D, Point3D
from .zones import District, ZoneManager

logger = structlog.get_logger()


class WorldDescription:
    """Immutable result of a world build.

    Holds the generator components for point queries and exposes the
    generated data as tuples and a read-only elevation grid.
    """

    def __init__(
        self,
        config: WorldConfig,
        heightfield: HeightfieldGenerator,
        zones: ZoneManager,
        routes: RouteNetwork,
        scatter: ScatterResult,
    ) -> None:
        self.config = config
        self._heightfield = heightfield
        self._zones = zones
        self._routes = routes
        self._scatter = scatter

    @property
    def heightfield(self) -> HeightfieldGenerator:
        return self._heightfield

    @property
    def elevation(self) -> NDArray[np.float64]:
        return self._heightfield.elevation

    @property
    def districts(self) -> tuple[District, ...]:
        return self._zones.districts

    @property
    def locations(self) -> tuple[Location, ...]:
        return self._routes.locations

    @property
    def paths(self) -> tuple[PathConnection, ...]:
        return self._routes.connections

    @property
    def trees(self) -> tuple[Tree, ...]:
        return self._scatter.trees

    @property
    def rocks(self) -> tuple[Rock, ...]:
        return self._scatter.rocks

    @property
    def plants(self) -> tuple[Plant, ...]:
        return self._scatter.plants

    @property
    def decorations(self) -> tuple[Decoration, ...]:
        return self._scatter.decorations

    @property
    def elements(self) -> tuple[EnvironmentElement, ...]:
        return self._scatter.elements

    def height_at(self, x: float, z: float) -> float:
        return self._heightfield.height_at(x, z)

    def terrain_class_at(self, x: float, z: float) -> TerrainClass:
        return self._heightfield.terrain_class_at(x, z)

    def district_at(self, point: Point2D | Point3D) -> District:
        return self._zones.district_at(point)

    def influence_at(self, district: District, point: Point2D | Point3D) -> float:
        return self._zones.influence_at(district, point)

    def nearest_path_point(self, point: Point2D | Point3D) -> PathHit | None:
        return self._routes.nearest_path_point(point)

    def find_route(self, start_id: str, end_id: str) -> PathConnection:
        return self._routes.find_route(start_id, end_id)

    def shortest_route(self, start_id: str, end_id: str) -> RoutePlan | None:
        return self._routes.shortest_route(start_id, end_id)

    def summary(self) -> dict[str, Any]:
        """Counts and terrain statistics for logging."""
        return {
            "seed": self.config.seed,
            "districts": len(self.districts),
            "locations": len(self.locations),
            "paths": len(self.paths),
            "trees": len(self.trees),
            "rocks": len(self.rocks),
            "plants": len(self.plants),
            "decorations": len(self.decorations),
            **{key: round(value, 3) for key, value in self._heightfield.stats().items()},
        }


def build_world(
    config: WorldConfig | Mapping[str, Any],
    *,
    noise: NoiseSource | None = None,
) -> WorldDescription:
    """Build a complete world from a configuration.

    Stages run in dependency order: heightfield, zoning, routes, scatter.
    The same configuration always yields the same world.

    Args:
        config: World configuration or an equivalent mapping.
        noise: Optional noise source replacing the seeded simplex noise.

    Returns:
        The finished, frozen WorldDescription.

    Raises:
        ConfigurationError: If the configuration is invalid. Nothing is
            built in that case.
    """
    config = coerce_config(config)
    config.check()

    start_time = time.perf_counter()
    logger.info("world_build_started", seed=config.seed, size=config.size)

    heightfield = HeightfieldGenerator(
        config.seed,
        config.size,
        config.resolution,
        config.max_height,
        noise=noise,
        config=config.terrain,
    )

    zones = ZoneManager(heightfield, config.district_count, seed=config.seed)

    routes = RouteNetwork(
        heightfield,
        seed=config.seed,
        path_width=config.path_width,
        main_road_width=config.main_road_width,
    )
    routes.build_default_layout(zones.districts, ring=zones.peripheral_districts)

    scatter = ScatterEngine(
        heightfield,
        zones,
        seed=config.seed,
        tree_density=config.tree_density,
        rock_density=config.rock_density,
        plant_density=config.plant_density,
        decoration_density=config.decoration_density,
        grid_size=config.grid_size,
    ).generate()

    zones.freeze()
    routes.freeze()

    world = WorldDescription(config, heightfield, zones, routes, scatter)
    logger.info(
        "world_built",
        duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
        districts=len(world.districts),
        paths=len(world.paths),
        elements=len(scatter),
    )
    return world
