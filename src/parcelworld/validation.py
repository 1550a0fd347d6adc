"""Post-build validation of world invariants."""

import math

import numpy as np
import structlog

from .exceptions import ConfigurationError
from .routes import PATH_CLEARANCE
from .terrain_types import TerrainClass
from .types import Point2D
from .world import WorldDescription

logger = structlog.get_logger()


class ValidationResult:
    """Result of world validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_world(
    world: WorldDescription,
    tolerance: float = 1e-6,
    coverage_samples: int = 16,
) -> ValidationResult:
    """Check a built world against its invariants.

    Args:
        world: The world to check.
        tolerance: Allowed floating point error for path clearance.
        coverage_samples: Samples per axis for the district coverage check.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    _check_height_bounds(world, result)
    _check_districts(world, coverage_samples, result)
    _check_path_clearance(world, tolerance, result)
    _check_placement(world, result)

    if result.passed:
        logger.info("world_validation_passed", warnings=len(result.warnings))
    else:
        logger.warning("world_validation_failed", errors=len(result.errors))
        for error in result.errors:
            logger.error("world_validation_error", detail=error)

    for warning in result.warnings:
        logger.warning("world_validation_warning", detail=warning)

    return result


def _check_height_bounds(world: WorldDescription, result: ValidationResult) -> None:
    """Check that every grid height is finite and within [0, max_height]."""
    elevation = world.elevation
    max_height = world.config.max_height

    if not np.all(np.isfinite(elevation)):
        result.add_error("Elevation grid contains non-finite values")
        return

    below = int(np.sum(elevation < 0))
    above = int(np.sum(elevation > max_height))
    if below or above:
        result.add_error(
            f"Elevation out of range: {below} below 0, {above} above {max_height}"
        )


def _check_districts(
    world: WorldDescription, samples: int, result: ValidationResult
) -> None:
    """Check district parameters and that sampled points are zoned."""
    if not world.districts:
        result.add_error("World has no districts")
        return

    for district in world.districts:
        if district.radius <= 0:
            result.add_error(f"{district.id} has non-positive radius {district.radius}")
        if not 0.0 <= district.importance <= 1.0:
            result.add_error(f"{district.id} importance {district.importance} outside [0, 1]")

    known = {district.id for district in world.districts}
    half = world.config.size / 2
    for x in np.linspace(-half, half, samples):
        for z in np.linspace(-half, half, samples):
            try:
                district = world.district_at(Point2D(x=float(x), z=float(z)))
            except ConfigurationError as e:
                result.add_error(f"Point ({x:.1f}, {z:.1f}) has no district: {e}")
                continue
            if district.id not in known:
                result.add_error(
                    f"Point ({x:.1f}, {z:.1f}) resolves to unknown district {district.id}"
                )


def _check_path_clearance(
    world: WorldDescription, tolerance: float, result: ValidationResult
) -> None:
    """Check that every path sample floats PATH_CLEARANCE above the terrain."""
    if not world.paths:
        result.add_warning("Route network has no paths")
        return

    bad = 0
    for path in world.paths:
        for point in path.points:
            expected = world.height_at(point.x, point.z) + PATH_CLEARANCE
            if not math.isclose(point.y, expected, abs_tol=tolerance):
                bad += 1
    if bad:
        result.add_error(f"{bad} path samples do not follow the terrain")


def _check_placement(world: WorldDescription, result: ValidationResult) -> None:
    """Check that placed elements respect their terrain rules."""
    forbidden = {
        "tree": (world.trees, {TerrainClass.WATER}),
        "plant": (world.plants, {TerrainClass.WATER}),
        "decoration": (world.decorations, {TerrainClass.WATER}),
        "rock": (world.rocks, {TerrainClass.WATER, TerrainClass.BEACH}),
    }

    total = 0
    for name, (elements, classes) in forbidden.items():
        total += len(elements)
        bad = sum(
            1
            for element in elements
            if world.terrain_class_at(element.position.x, element.position.z) in classes
        )
        if bad:
            result.add_error(f"{bad} {name} placements on forbidden terrain")

    if total == 0:
        result.add_warning("Scatter pass placed no elements")
