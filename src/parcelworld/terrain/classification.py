"""Terrain classification: water, beach, grass, forest, mountain, snow."""

import numpy as np
from numpy.typing import NDArray

from ..config import TerrainConfig
from ..terrain_types import TerrainClass


def classify(
    height: float,
    moisture: float,
    max_height: float,
    config: TerrainConfig,
) -> TerrainClass:
    """Classify a single point from its height and moisture.

    Height bands are checked from the bottom (water, beach) and then from
    the top (snow, mountain); only the remaining middle band depends on
    moisture.

    Args:
        height: Terrain height at the point.
        moisture: Moisture value in [0, 1].
        max_height: World maximum height the thresholds are relative to.
        config: Terrain thresholds.

    Returns:
        The TerrainClass for the point.
    """
    water_level = max_height * config.water_level
    if height < water_level:
        return TerrainClass.WATER
    if height < water_level + config.beach_band:
        return TerrainClass.BEACH
    if height > max_height * config.snow_level:
        return TerrainClass.SNOW
    if height > max_height * config.mountain_level:
        return TerrainClass.MOUNTAIN
    if moisture > config.forest_moisture:
        return TerrainClass.FOREST
    return TerrainClass.GRASS


def classify_grid(
    heights: NDArray[np.floating],
    moisture: NDArray[np.floating],
    max_height: float,
    config: TerrainConfig,
) -> NDArray[np.uint8]:
    """Classify every cell of a grid.

    Args:
        heights: 2D height array.
        moisture: Moisture array of the same shape, values in [0, 1].
        max_height: World maximum height.
        config: Terrain thresholds.

    Returns:
        2D array of ``TerrainClass.index`` values as uint8.
    """
    water_level = max_height * config.water_level
    conditions = [
        heights < water_level,
        heights < water_level + config.beach_band,
        heights > max_height * config.snow_level,
        heights > max_height * config.mountain_level,
        moisture > config.forest_moisture,
    ]
    choices = [
        TerrainClass.WATER.index,
        TerrainClass.BEACH.index,
        TerrainClass.SNOW.index,
        TerrainClass.MOUNTAIN.index,
        TerrainClass.FOREST.index,
    ]
    return np.select(conditions, choices, default=TerrainClass.GRASS.index).astype(np.uint8)


def class_fractions(classes: NDArray[np.uint8]) -> dict[TerrainClass, float]:
    """Fraction of cells in each terrain class."""
    total = classes.size
    if total == 0:
        return {terrain_class: 0.0 for terrain_class in TerrainClass}
    counts = np.bincount(classes.ravel(), minlength=len(TerrainClass))
    return {
        terrain_class: float(counts[terrain_class.index]) / total
        for terrain_class in TerrainClass
    }
