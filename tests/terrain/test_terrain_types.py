"""Tests for TerrainClass properties."""

from parcelworld.terrain_types import TerrainClass


class TestTerrainClass:
    """Tests for terrain class codes and flags."""

    def test_index_round_trip(self) -> None:
        """from_index inverts index."""
        for terrain_class in TerrainClass:
            assert TerrainClass.from_index(terrain_class.index) is terrain_class

    def test_indices_unique(self) -> None:
        indices = [terrain_class.index for terrain_class in TerrainClass]
        assert sorted(indices) == list(range(len(TerrainClass)))

    def test_buildable(self) -> None:
        """Water and beach are not buildable."""
        assert not TerrainClass.WATER.buildable
        assert not TerrainClass.BEACH.buildable
        assert TerrainClass.GRASS.buildable
        assert TerrainClass.SNOW.buildable

    def test_is_water(self) -> None:
        assert TerrainClass.WATER.is_water
        assert not TerrainClass.BEACH.is_water
