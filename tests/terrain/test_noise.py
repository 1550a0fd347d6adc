"""Tests for noise sources."""

import numpy as np
import pytest

from parcelworld.terrain.noise import ConstantNoise, NoiseChannel, SimplexNoise, to_unit


class TestSimplexNoise:
    """Tests for the seeded OpenSimplex source."""

    def test_deterministic_with_same_seed(self) -> None:
        """Same seed produces identical samples."""
        a = SimplexNoise(42)
        b = SimplexNoise(42)
        for x, y in [(0.1, 0.2), (3.5, -1.25), (-10.0, 7.0)]:
            assert a.noise2(NoiseChannel.ELEVATION, x, y) == b.noise2(NoiseChannel.ELEVATION, x, y)

    def test_different_seed_different_output(self) -> None:
        """Different seeds produce different grids."""
        xs = np.linspace(0, 5, 16)
        a = SimplexNoise(1).noise2_grid(NoiseChannel.ELEVATION, xs, xs)
        b = SimplexNoise(2).noise2_grid(NoiseChannel.ELEVATION, xs, xs)
        assert not np.allclose(a, b)

    def test_channels_are_independent(self) -> None:
        """Channels of one source are not copies of each other."""
        noise = SimplexNoise(7)
        xs = np.linspace(0, 5, 16)
        elevation = noise.noise2_grid(NoiseChannel.ELEVATION, xs, xs)
        moisture = noise.noise2_grid(NoiseChannel.MOISTURE, xs, xs)
        assert not np.allclose(elevation, moisture)

    def test_grid_shape(self) -> None:
        """Grid rows follow ys, columns follow xs."""
        noise = SimplexNoise(3)
        result = noise.noise2_grid(NoiseChannel.DETAIL, np.zeros(10), np.zeros(4))
        assert result.shape == (4, 10)

    def test_grid_matches_scalar(self) -> None:
        """Grid sampling agrees with point sampling."""
        noise = SimplexNoise(5)
        xs = np.array([0.0, 0.3, 1.7])
        ys = np.array([-0.5, 2.25])
        grid = noise.noise2_grid(NoiseChannel.ROUGHNESS, xs, ys)
        for row, y in enumerate(ys):
            for col, x in enumerate(xs):
                expected = noise.noise2(NoiseChannel.ROUGHNESS, float(x), float(y))
                assert grid[row, col] == pytest.approx(expected, abs=1e-9)

    def test_output_range(self) -> None:
        """Samples stay within [-1, 1]."""
        xs = np.linspace(-20, 20, 64)
        result = SimplexNoise(9).noise2_grid(NoiseChannel.ZONING, xs, xs)
        assert result.min() >= -1.0
        assert result.max() <= 1.0


class TestConstantNoise:
    """Tests for the constant source."""

    def test_scalar(self) -> None:
        noise = ConstantNoise(0.25)
        assert noise.noise2(NoiseChannel.ELEVATION, 3.0, 4.0) == 0.25

    def test_grid(self) -> None:
        """Grid is filled with the constant value."""
        result = ConstantNoise(-1.0).noise2_grid(NoiseChannel.MOISTURE, np.arange(3), np.arange(5))
        assert result.shape == (5, 3)
        assert np.all(result == -1.0)


class TestToUnit:
    """Tests for the [-1, 1] to [0, 1] mapping."""

    def test_endpoints(self) -> None:
        assert to_unit(-1.0) == 0.0
        assert to_unit(0.0) == 0.5
        assert to_unit(1.0) == 1.0

    def test_clips_overshoot(self) -> None:
        """Values outside [-1, 1] are clipped."""
        assert to_unit(1.5) == 1.0
        assert to_unit(-3.0) == 0.0

    def test_array(self) -> None:
        """Arrays are mapped element-wise."""
        result = to_unit(np.array([-2.0, -1.0, 0.0, 1.0]))
        np.testing.assert_allclose(result, [0.0, 0.0, 0.5, 1.0])
