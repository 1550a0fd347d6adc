"""Heightfield generation and terrain queries.

The heightfield is a dense elevation grid built from three layered noise
channels. Queries at arbitrary world positions interpolate the grid, so
every consumer sees the same continuous surface the renderer meshes.
"""

import math

import numpy as np
import structlog
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel
from scipy.ndimage import map_coordinates

from ..config import TerrainConfig
from ..exceptions import ConfigurationError
from ..terrain_types import TerrainClass
from .classification import class_fractions, classify, classify_grid
from .noise import NoiseChannel, NoiseSource, SimplexNoise, to_unit

logger = structlog.get_logger()

# Sub-stream of the world seed used by the flat site search.
_SITE_STREAM = 11

# Neighbourhood samples per axis checked around a flat site candidate.
_SITE_SAMPLES = 5


class FlatSite(BaseModel, frozen=True):
    """Result of a flat site search.

    ``fallback`` is True when the search budget ran out and the origin
    was returned instead. Callers should treat that as a valid but
    possibly unsuitable site.
    """

    x: float
    z: float
    height: float
    fallback: bool = False


def layer_heights(
    continental: NDArray[np.float64],
    hills: NDArray[np.float64],
    detail: NDArray[np.float64],
    max_height: float,
    config: TerrainConfig,
) -> NDArray[np.float64]:
    """Combine noise layers into heights and apply plateau and water rules.

    Args:
        continental: Continental layer in [0, 1].
        hills: Hill layer in [0, 0.5].
        detail: Detail layer in [-0.25, 0.25].
        max_height: Maximum terrain height.
        config: Shaping constants.

    Returns:
        Heights clamped to [0, max_height].
    """
    height = (
        continental * max_height * config.continental_weight
        + hills * max_height * config.hill_weight
        + detail * max_height * config.detail_weight
    )

    # Plateaus: flatten the top of the continental range
    plateau = continental > config.plateau_threshold
    factor = (continental - config.plateau_threshold) / (1.0 - config.plateau_threshold)
    flattened = height * (1.0 - factor * config.plateau_strength) + factor * (
        max_height * config.plateau_height
    )
    height = np.where(plateau, flattened, height)

    # Basins: compress low ground toward a shallow band below water level
    water_level = max_height * config.water_level
    basin = height < water_level
    water_factor = 1.0 - height / water_level
    leveled = height * (1.0 - water_factor * config.water_flattening) + water_factor * (
        water_level * config.shallow_band
    )
    height = np.where(basin, leveled, height)

    return np.clip(height, 0.0, max_height)


class HeightfieldGenerator:
    """Deterministic elevation and terrain classification for a square world.

    The world spans ``[-size/2, size/2]`` on both X and Z. Grid node
    ``(row, col)`` sits at ``z = coords[row]``, ``x = coords[col]``.
    """

    def __init__(
        self,
        seed: int,
        size: float,
        resolution: int,
        max_height: float,
        *,
        noise: NoiseSource | None = None,
        config: TerrainConfig | None = None,
    ) -> None:
        if seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {seed}")
        if size <= 0:
            raise ConfigurationError(f"size must be positive, got {size}")
        if resolution < 2:
            raise ConfigurationError(f"resolution must be at least 2, got {resolution}")
        if max_height <= 0:
            raise ConfigurationError(f"max_height must be positive, got {max_height}")

        self.seed = seed
        self.size = float(size)
        self.resolution = resolution
        self.max_height = float(max_height)
        self.config = config or TerrainConfig()
        self._noise = noise if noise is not None else SimplexNoise(seed)
        self._rng = np.random.default_rng([seed, _SITE_STREAM])
        self._coords = np.linspace(-self.size / 2, self.size / 2, resolution)
        self._cell = self.size / (resolution - 1)

        self._elevation = self.generate()
        self._classes = self._classify_nodes()
        self._log_stats()

    @property
    def elevation(self) -> NDArray[np.float64]:
        """Read-only elevation grid, shape (resolution, resolution)."""
        return self._elevation

    @property
    def classes(self) -> NDArray[np.uint8]:
        """Read-only terrain class indices for every grid node."""
        return self._classes

    @property
    def coordinates(self) -> NDArray[np.float64]:
        """World coordinates of grid nodes along either axis."""
        return self._coords

    @property
    def half_size(self) -> float:
        return self.size / 2

    @property
    def noise(self) -> NoiseSource:
        return self._noise

    def generate(self) -> NDArray[np.float64]:
        """Build the elevation grid.

        Each node depends only on its own coordinates, so the grid can be
        evaluated in any order or in parallel with identical results.
        """
        n = self._coords * self.config.frequency
        continental = to_unit(self._noise.noise2_grid(NoiseChannel.ELEVATION, n * 0.5, n * 0.5))
        hills = to_unit(self._noise.noise2_grid(NoiseChannel.ROUGHNESS, n, n)) * 0.5
        detail = self._noise.noise2_grid(NoiseChannel.DETAIL, n * 2, n * 2) * 0.25

        elevation = layer_heights(continental, hills, detail, self.max_height, self.config)
        elevation.setflags(write=False)
        return elevation

    def raw_height_at(self, x: float, z: float) -> float:
        """Evaluate the layered height function directly, without the grid."""
        nx = x * self.config.frequency
        nz = z * self.config.frequency
        continental = to_unit(self._noise.noise2(NoiseChannel.ELEVATION, nx * 0.5, nz * 0.5))
        hills = to_unit(self._noise.noise2(NoiseChannel.ROUGHNESS, nx, nz)) * 0.5
        detail = self._noise.noise2(NoiseChannel.DETAIL, nx * 2, nz * 2) * 0.25
        height = layer_heights(
            np.asarray(continental),
            np.asarray(hills),
            np.asarray(detail),
            self.max_height,
            self.config,
        )
        return float(height)

    def height_at(self, x: float, z: float) -> float:
        """Bilinearly interpolated height at a world position.

        Positions outside the world are clamped to the nearest edge.
        """
        last = self.resolution - 1
        gx = min(max((x + self.half_size) / self._cell, 0.0), last)
        gz = min(max((z + self.half_size) / self._cell, 0.0), last)

        x0 = min(int(gx), last - 1)
        z0 = min(int(gz), last - 1)
        fx = gx - x0
        fz = gz - z0

        grid = self._elevation
        h00 = grid[z0, x0]
        h10 = grid[z0, x0 + 1]
        h01 = grid[z0 + 1, x0]
        h11 = grid[z0 + 1, x0 + 1]

        top = h00 * (1.0 - fx) + h10 * fx
        bottom = h01 * (1.0 - fx) + h11 * fx
        return float(top * (1.0 - fz) + bottom * fz)

    def heights_at(self, xs: ArrayLike, zs: ArrayLike) -> NDArray[np.float64]:
        """Vectorised ``height_at`` for matching arrays of positions."""
        xs = np.asarray(xs, dtype=np.float64)
        zs = np.asarray(zs, dtype=np.float64)
        cols = (xs + self.half_size) / self._cell
        rows = (zs + self.half_size) / self._cell
        coords = np.array([rows.ravel(), cols.ravel()])
        result = map_coordinates(self._elevation, coords, order=1, mode="nearest")
        return result.reshape(xs.shape)

    def moisture_at(self, x: float, z: float) -> float:
        """Moisture in [0, 1] from the dedicated noise channel."""
        f = self.config.moisture_frequency
        return to_unit(self._noise.noise2(NoiseChannel.MOISTURE, x * f, z * f))

    def terrain_class_at(self, x: float, z: float) -> TerrainClass:
        """Terrain class at a world position."""
        return classify(
            self.height_at(x, z),
            self.moisture_at(x, z),
            self.max_height,
            self.config,
        )

    def slope_at(self, x: float, z: float, sample_distance: float = 1.0) -> float:
        """Gradient magnitude from central differences."""
        d = sample_distance
        grad_x = (self.height_at(x + d, z) - self.height_at(x - d, z)) / (2 * d)
        grad_z = (self.height_at(x, z + d) - self.height_at(x, z - d)) / (2 * d)
        return math.hypot(grad_x, grad_z)

    def normal_at(
        self, x: float, z: float, sample_distance: float = 1.0
    ) -> tuple[float, float, float]:
        """Unit surface normal (x, y, z) with +Y up."""
        d = sample_distance
        h_north = self.height_at(x, z - d)
        h_south = self.height_at(x, z + d)
        h_east = self.height_at(x + d, z)
        h_west = self.height_at(x - d, z)

        nx = h_west - h_east
        ny = 2 * d
        nz = h_north - h_south
        length = math.sqrt(nx * nx + ny * ny + nz * nz)
        return (nx / length, ny / length, nz / length)

    def find_flat_site(self, min_size: float = 5.0, max_slope: float = 0.1) -> FlatSite:
        """Search for a dry, gently sloped site.

        Candidates are drawn from the central 80% of the world. A candidate
        is accepted when its slope is below ``max_slope`` and a grid of
        samples spanning ``min_size`` around it is neither too steep nor
        water/beach.

        The search is capped at ``config.flat_site_attempts`` candidates.
        When the budget runs out the origin is returned with
        ``fallback=True``; the search never retries beyond the budget.

        Args:
            min_size: Side of the square neighbourhood that must be flat.
            max_slope: Maximum accepted slope.

        Returns:
            The accepted site, or the origin fallback.
        """
        span = self.size * 0.8
        attempts = self.config.flat_site_attempts

        for _ in range(attempts):
            x = (self._rng.random() - 0.5) * span
            z = (self._rng.random() - 0.5) * span

            if self.slope_at(x, z) >= max_slope:
                continue
            if not self.terrain_class_at(x, z).buildable:
                continue
            if self._neighbourhood_is_flat(x, z, min_size, max_slope):
                return FlatSite(x=x, z=z, height=self.height_at(x, z))

        logger.warning(
            "flat_site_fallback",
            attempts=attempts,
            min_size=min_size,
            max_slope=max_slope,
        )
        return FlatSite(x=0.0, z=0.0, height=self.height_at(0.0, 0.0), fallback=True)

    def stats(self) -> dict[str, float]:
        """Height statistics and terrain class fractions over the grid."""
        result = {
            "min_height": float(self._elevation.min()),
            "max_height": float(self._elevation.max()),
            "mean_height": float(self._elevation.mean()),
        }
        for terrain_class, fraction in class_fractions(self._classes).items():
            result[terrain_class.value] = fraction
        return result

    def _neighbourhood_is_flat(
        self, x: float, z: float, min_size: float, max_slope: float
    ) -> bool:
        offsets = np.linspace(-min_size / 2, min_size / 2, _SITE_SAMPLES)
        for dx in offsets:
            for dz in offsets:
                sx = x + dx
                sz = z + dz
                if self.slope_at(sx, sz) > max_slope:
                    return False
                if not self.terrain_class_at(sx, sz).buildable:
                    return False
        return True

    def _classify_nodes(self) -> NDArray[np.uint8]:
        f = self.config.moisture_frequency * self._coords
        moisture = to_unit(self._noise.noise2_grid(NoiseChannel.MOISTURE, f, f))
        classes = classify_grid(self._elevation, moisture, self.max_height, self.config)
        classes.setflags(write=False)
        return classes

    def _log_stats(self) -> None:
        stats = self.stats()
        logger.info(
            "heightfield_generated",
            seed=self.seed,
            resolution=self.resolution,
            size=self.size,
            **{key: round(value, 3) for key, value in stats.items()},
        )
