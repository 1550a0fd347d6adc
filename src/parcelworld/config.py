"""World generation configuration models and TOML loading."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError


class TerrainConfig(BaseModel):
    """Heightfield shaping and classification constants.

    Level fractions are relative to the world's max height.
    """

    frequency: float = Field(default=0.01, gt=0, description="World-to-noise coordinate scale")
    continental_weight: float = Field(
        default=0.70, ge=0, description="Weight of the continental layer"
    )
    hill_weight: float = Field(default=0.25, ge=0, description="Weight of the hill layer")
    detail_weight: float = Field(default=0.05, ge=0, description="Weight of the detail layer")
    plateau_threshold: float = Field(
        default=0.6, gt=0, lt=1, description="Continental value above which terrain flattens"
    )
    plateau_strength: float = Field(
        default=0.4, ge=0, le=1, description="How strongly plateaus pull toward plateau height"
    )
    plateau_height: float = Field(
        default=0.7, ge=0, le=1, description="Plateau height as a fraction of max height"
    )
    water_level: float = Field(
        default=0.25, gt=0, lt=1, description="Water level as a fraction of max height"
    )
    water_flattening: float = Field(
        default=0.5, ge=0, le=1, description="How strongly basins are pulled toward the shallow band"
    )
    shallow_band: float = Field(
        default=0.8, ge=0, le=1, description="Basin floor as a fraction of water level"
    )
    beach_band: float = Field(
        default=0.2, ge=0, description="Height above water level classified as beach"
    )
    mountain_level: float = Field(
        default=0.7, gt=0, le=1, description="Mountain line as a fraction of max height"
    )
    snow_level: float = Field(
        default=0.8, gt=0, le=1, description="Snow line as a fraction of max height"
    )
    moisture_frequency: float = Field(default=0.02, gt=0, description="Moisture noise scale")
    forest_moisture: float = Field(
        default=0.6, ge=0, le=1, description="Moisture above which grass becomes forest"
    )
    flat_site_attempts: int = Field(
        default=100, ge=0, description="Candidate budget for flat site search"
    )


class WorldConfig(BaseModel):
    """Complete world build configuration."""

    seed: int = Field(default=1, description="Random seed for reproducibility")
    size: float = Field(default=100.0, description="World side length in world units")
    resolution: int = Field(default=128, description="Elevation grid nodes per side")
    max_height: float = Field(default=5.0, description="Maximum terrain height")
    district_count: int = Field(default=4, description="Number of peripheral districts")

    tree_density: float = Field(default=0.5, description="Tree probability without zoning")
    rock_density: float = Field(default=0.3, description="Base rock probability per cell")
    plant_density: float = Field(default=0.6, description="Base plant probability per cell")
    decoration_density: float = Field(
        default=0.4, description="Decoration probability per eligible cell"
    )
    grid_size: float = Field(default=5.0, description="Scatter grid spacing in world units")

    path_width: float = Field(default=2.0, description="Secondary road width")
    main_road_width: float = Field(default=3.5, description="Main road width")

    terrain: TerrainConfig = Field(default_factory=TerrainConfig)

    def check(self) -> None:
        """Reject configurations that cannot produce a world.

        Raises:
            ConfigurationError: On the first invalid value found.
        """
        if self.size <= 0:
            raise ConfigurationError(f"size must be positive, got {self.size}")
        if self.resolution < 2:
            raise ConfigurationError(f"resolution must be at least 2, got {self.resolution}")
        if self.max_height <= 0:
            raise ConfigurationError(f"max_height must be positive, got {self.max_height}")
        if self.seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {self.seed}")
        if self.district_count < 0:
            raise ConfigurationError(
                f"district_count must be non-negative, got {self.district_count}"
            )
        if self.grid_size <= 0:
            raise ConfigurationError(f"grid_size must be positive, got {self.grid_size}")
        for name in ("tree_density", "rock_density", "plant_density", "decoration_density"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if self.path_width <= 0 or self.main_road_width <= 0:
            raise ConfigurationError("road widths must be positive")


class Config(BaseModel):
    """Top-level layout of a world TOML file."""

    world: WorldConfig = Field(default_factory=WorldConfig)


def coerce_config(data: "WorldConfig | dict") -> WorldConfig:
    """Turn a mapping into a WorldConfig, reporting problems as ConfigurationError."""
    if isinstance(data, WorldConfig):
        return data
    try:
        return WorldConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def load_config(config_path: Path) -> WorldConfig:
    """Load a world configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed WorldConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        ConfigurationError: If values don't match the schema.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    try:
        return Config.model_validate(data).world
    except ValidationError as e:
        raise ConfigurationError(f"{config_path}: {e}") from e


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"
