"""Tests for configuration loading."""

from pathlib import Path

import pytest

from parcelworld.config import (
    TerrainConfig,
    WorldConfig,
    coerce_config,
    find_config,
    list_configs,
    load_config,
)
from parcelworld.exceptions import ConfigurationError


class TestWorldConfig:
    """Tests for model defaults and checks."""

    def test_defaults(self) -> None:
        config = WorldConfig()
        assert config.seed == 1
        assert config.size == 100.0
        assert config.resolution == 128
        assert config.max_height == 5.0
        assert config.district_count == 4
        assert config.terrain == TerrainConfig()
        config.check()

    def test_check_rejects_bad_density(self) -> None:
        with pytest.raises(ConfigurationError, match="rock_density"):
            WorldConfig(rock_density=-0.1).check()

    def test_check_rejects_bad_road_width(self) -> None:
        with pytest.raises(ConfigurationError):
            WorldConfig(path_width=0).check()

    def test_coerce_mapping(self) -> None:
        config = coerce_config({"seed": 9, "terrain": {"water_level": 0.3}})
        assert config.seed == 9
        assert config.terrain.water_level == 0.3

    def test_coerce_passes_model_through(self) -> None:
        config = WorldConfig(seed=4)
        assert coerce_config(config) is config

    def test_coerce_invalid_type(self) -> None:
        with pytest.raises(ConfigurationError):
            coerce_config({"resolution": "lots"})

    @pytest.mark.parametrize(
        "terrain",
        [
            {"water_level": 0},
            {"water_level": 1.0},
            {"plateau_threshold": 1.0},
            {"frequency": 0},
            {"snow_level": 1.5},
            {"forest_moisture": -0.1},
            {"flat_site_attempts": -1},
        ],
    )
    def test_terrain_bounds(self, terrain: dict) -> None:
        """Terrain constants that would break height shaping are rejected."""
        with pytest.raises(ConfigurationError):
            coerce_config({"terrain": terrain})

    def test_terrain_zero_attempts_allowed(self) -> None:
        config = coerce_config({"terrain": {"flat_site_attempts": 0}})
        assert config.terrain.flat_site_attempts == 0


class TestLoadConfig:
    """Tests for TOML loading."""

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "world.toml"
        path.write_text(
            "[world]\nseed = 5\nsize = 40.0\n\n[world.terrain]\nbeach_band = 0.1\n"
        )
        config = load_config(path)
        assert config.seed == 5
        assert config.size == 40.0
        assert config.terrain.beach_band == 0.1
        assert config.resolution == 128

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.toml"
        path.write_text("")
        assert load_config(path) == WorldConfig()

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[world]\nseed = "abc"\n')
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_zero_water_level(self, tmp_path: Path) -> None:
        """A zero water level is caught at load time."""
        path = tmp_path / "flat_sea.toml"
        path.write_text("[world.terrain]\nwater_level = 0.0\n")
        with pytest.raises(ConfigurationError, match="water_level"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")


class TestFindConfig:
    """Tests for config lookup."""

    def test_shipped_configs(self) -> None:
        names = list_configs()
        assert "default" in names
        assert "small" in names

    def test_find_by_name(self) -> None:
        path = find_config("default")
        assert path.name == "default.toml"
        load_config(path).check()

    def test_find_by_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text("[world]\nseed = 3\n")
        assert find_config(str(path)) == path

    def test_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            find_config("no_such_config")
