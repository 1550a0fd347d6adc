"""Core geometric types for the world plane.

The world is a horizontal X/Z plane centered at the origin with Y as
elevation, matching the convention of the rendering layer.
"""

import math

from pydantic import BaseModel


class Point2D(BaseModel, frozen=True):
    """Immutable point on the ground plane."""

    x: float
    z: float

    def distance_to(self, other: "Point2D | Point3D") -> float:
        """Horizontal distance to another point."""
        return math.hypot(self.x - other.x, self.z - other.z)

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.z:.2f})"


class Point3D(BaseModel, frozen=True):
    """Immutable point in world space."""

    x: float
    y: float
    z: float

    @property
    def ground(self) -> Point2D:
        """Projection onto the ground plane."""
        return Point2D(x=self.x, z=self.z)

    def distance_to(self, other: "Point3D") -> float:
        """Euclidean distance to another point."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"
