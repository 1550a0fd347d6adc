"""Coherent noise sources for terrain and zoning.

Every generator in the package samples noise through the ``NoiseSource``
protocol so the underlying implementation can be swapped, e.g. for a
constant field when testing degenerate worlds.
"""

from enum import IntEnum
from typing import Protocol

import numpy as np
from numpy.typing import ArrayLike, NDArray
from opensimplex import OpenSimplex


class NoiseChannel(IntEnum):
    """Independent noise streams derived from a single world seed."""

    ELEVATION = 0
    ROUGHNESS = 1
    DETAIL = 2
    MOISTURE = 3
    ZONING = 4


class NoiseSource(Protocol):
    """A seeded 2D coherent noise function with values roughly in [-1, 1]."""

    def noise2(self, channel: NoiseChannel, x: float, y: float) -> float:
        ...

    def noise2_grid(
        self, channel: NoiseChannel, xs: ArrayLike, ys: ArrayLike
    ) -> NDArray[np.float64]:
        """Sample the lattice ``xs`` x ``ys``; result has shape (len(ys), len(xs))."""
        ...


class SimplexNoise:
    """OpenSimplex noise with one generator per channel.

    Channel ``c`` is seeded with ``seed + c`` so the channels are
    decorrelated while remaining reproducible.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._generators = {
            channel: OpenSimplex(seed=seed + int(channel)) for channel in NoiseChannel
        }

    def noise2(self, channel: NoiseChannel, x: float, y: float) -> float:
        return float(self._generators[channel].noise2(x, y))

    def noise2_grid(
        self, channel: NoiseChannel, xs: ArrayLike, ys: ArrayLike
    ) -> NDArray[np.float64]:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        return np.asarray(self._generators[channel].noise2array(xs, ys), dtype=np.float64)


class ConstantNoise:
    """Noise source returning the same value everywhere."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def noise2(self, channel: NoiseChannel, x: float, y: float) -> float:
        return self.value

    def noise2_grid(
        self, channel: NoiseChannel, xs: ArrayLike, ys: ArrayLike
    ) -> NDArray[np.float64]:
        xs = np.asarray(xs)
        ys = np.asarray(ys)
        return np.full((ys.size, xs.size), self.value, dtype=np.float64)


def to_unit(value: float | NDArray[np.float64]) -> float | NDArray[np.float64]:
    """Map noise from [-1, 1] to [0, 1], clipping overshoot."""
    if isinstance(value, np.ndarray):
        return np.clip((value + 1.0) * 0.5, 0.0, 1.0)
    return min(1.0, max(0.0, (value + 1.0) * 0.5))
