"""End-to-end tests for world builds."""

import numpy as np
import pytest

from parcelworld.config import WorldConfig
from parcelworld.exceptions import ConfigurationError
from parcelworld.routes import PATH_CLEARANCE, POST_OFFICE_ID, RoadClass
from parcelworld.terrain.noise import ConstantNoise
from parcelworld.terrain_types import TerrainClass
from parcelworld.types import Point2D
from parcelworld.world import WorldDescription, build_world

SMALL = {"seed": 2, "size": 60, "resolution": 32, "max_height": 4, "district_count": 3}


class TestScenario:
    """The reference world: seed 1, size 100, resolution 128, four districts."""

    def test_grid(self, scenario_world: WorldDescription) -> None:
        assert scenario_world.elevation.shape == (128, 128)
        assert scenario_world.elevation.min() >= 0.0
        assert scenario_world.elevation.max() <= 5.0

    def test_districts(self, scenario_world: WorldDescription) -> None:
        assert len(scenario_world.districts) == 5
        assert scenario_world.districts[0].center == Point2D(x=0.0, z=0.0)

    def test_locations(self, scenario_world: WorldDescription) -> None:
        ids = [location.id for location in scenario_world.locations]
        assert ids == [POST_OFFICE_ID] + [f"district_{i}" for i in range(5)]

    def test_roads(self, scenario_world: WorldDescription) -> None:
        """Five main roads from the post office and a four-road ring."""
        classes = [path.road_class for path in scenario_world.paths]
        assert classes.count(RoadClass.MAIN_ROAD) == 5
        assert classes.count(RoadClass.SECONDARY_ROAD) == 4

    def test_path_clearance(self, scenario_world: WorldDescription) -> None:
        for path in scenario_world.paths:
            for point in path.points:
                expected = scenario_world.height_at(point.x, point.z) + PATH_CLEARANCE
                assert point.y == pytest.approx(expected)

    def test_nothing_on_water(self, scenario_world: WorldDescription) -> None:
        elements = scenario_world.elements
        for element in elements:
            terrain_class = scenario_world.terrain_class_at(element.position.x, element.position.z)
            assert terrain_class is not TerrainClass.WATER

    def test_elements_inside_world(self, scenario_world: WorldDescription) -> None:
        """Scattered elements all lie on the rendered terrain."""
        elements = scenario_world.elements
        assert elements
        for element in elements:
            assert -50.0 <= element.position.x <= 50.0
            assert -50.0 <= element.position.z <= 50.0

    def test_every_point_zoned(self, scenario_world: WorldDescription) -> None:
        district_ids = {district.id for district in scenario_world.districts}
        for x in np.linspace(-50, 50, 7):
            for z in np.linspace(-50, 50, 7):
                district = scenario_world.district_at(Point2D(x=float(x), z=float(z)))
                assert district.id in district_ids

    def test_summary(self, scenario_world: WorldDescription) -> None:
        summary = scenario_world.summary()
        assert summary["seed"] == 1
        assert summary["districts"] == 5
        assert summary["paths"] == 9
        assert summary["trees"] == len(scenario_world.trees)

    def test_queries_after_build(self, scenario_world: WorldDescription) -> None:
        """Route queries work on the frozen world without changing it."""
        before = len(scenario_world.paths)
        route = scenario_world.find_route("district_1", "district_3")
        assert route.road_class is RoadClass.ROUTE
        assert len(scenario_world.paths) == before

        plan = scenario_world.shortest_route("district_1", "district_3")
        assert plan is not None
        assert plan.length > 0

        hit = scenario_world.nearest_path_point(Point2D(x=0.0, z=0.0))
        assert hit is not None


class TestDeterminism:
    """Same configuration, same world."""

    def test_repeat_build(self) -> None:
        a = build_world(SMALL)
        b = build_world(SMALL)
        np.testing.assert_array_equal(a.elevation, b.elevation)
        assert a.districts == b.districts
        assert a.locations == b.locations
        assert a.paths == b.paths
        assert a.trees == b.trees
        assert a.rocks == b.rocks
        assert a.plants == b.plants
        assert a.decorations == b.decorations

    def test_seed_changes_world(self) -> None:
        a = build_world(SMALL)
        b = build_world({**SMALL, "seed": 3})
        assert not np.array_equal(a.elevation, b.elevation)

    def test_accepts_model(self) -> None:
        world = build_world(WorldConfig(**SMALL))
        assert world.config.seed == 2


class TestConfigurationErrors:
    """Invalid configurations build nothing."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"size": 0},
            {"size": -5},
            {"resolution": 0},
            {"max_height": -1},
            {"seed": -1},
            {"district_count": -2},
            {"tree_density": 1.5},
            {"grid_size": 0},
            {"size": "big"},
        ],
    )
    def test_rejected(self, overrides: dict) -> None:
        with pytest.raises(ConfigurationError):
            build_world({**SMALL, **overrides})


class TestDegenerateWorlds:
    """Worlds at the edges of the parameter space."""

    def test_all_water(self) -> None:
        """The post office falls back to the origin and nothing is scattered."""
        world = build_world(SMALL, noise=ConstantNoise(-1.0))
        post_office = world.locations[0]
        assert (post_office.position.x, post_office.position.z) == (0.0, 0.0)
        assert len(world.trees) == len(world.rocks) == len(world.plants) == 0
        assert len(world.decorations) == 0
        assert world.paths

    def test_no_peripheral_districts(self) -> None:
        world = build_world({**SMALL, "district_count": 0})
        assert len(world.districts) == 1
        assert len(world.paths) == 1
        assert world.paths[0].road_class is RoadClass.MAIN_ROAD
