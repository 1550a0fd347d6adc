"""Shared test fixtures for world generation tests."""

import pytest

from parcelworld.terrain.heightfield import HeightfieldGenerator
from parcelworld.terrain.noise import ConstantNoise
from parcelworld.world import WorldDescription, build_world
from parcelworld.zones import ZoneManager


@pytest.fixture(scope="module")
def heightfield() -> HeightfieldGenerator:
    """Seeded 100x100 world on a 64x64 grid."""
    return HeightfieldGenerator(seed=1, size=100.0, resolution=64, max_height=5.0)


@pytest.fixture
def flat_heightfield() -> HeightfieldGenerator:
    """Level grassland: constant noise puts every point at 0.4125 * max height."""
    return HeightfieldGenerator(
        seed=3, size=100.0, resolution=16, max_height=5.0, noise=ConstantNoise(0.0)
    )


@pytest.fixture
def water_heightfield() -> HeightfieldGenerator:
    """World where every point is below water level."""
    return HeightfieldGenerator(
        seed=5, size=100.0, resolution=16, max_height=5.0, noise=ConstantNoise(-1.0)
    )


@pytest.fixture
def flat_zones(flat_heightfield: HeightfieldGenerator) -> ZoneManager:
    """Default district layout on level grassland."""
    return ZoneManager(flat_heightfield, district_count=4, seed=3)


@pytest.fixture(scope="module")
def scenario_world() -> WorldDescription:
    """The reference world: seed 1, size 100, resolution 128, four districts."""
    return build_world({
        "seed": 1,
        "size": 100,
        "resolution": 128,
        "max_height": 5,
        "district_count": 4,
    })
