"""Tests for multi-octave noise grids."""

import math

import pytest
import numpy as np

from py_voronoi_map.config.map_config import NoiseConfig
from py_voronoi_map.core.noise_field import NoiseFieldSet, NoiseGrid, generate_noise_grid
from py_voronoi_map.core.random_source import RandomSource


class TestNoiseGeneration:
    """Test noise grid generation."""

    @pytest.mark.parametrize("octaves,persistence", [(1, 0.5), (4, 0.2), (6, 0.5), (8, 0.9)])
    def test_values_bounded(self, octaves, persistence):
        """Test that every value lies in [0, 1]."""
        grid = generate_noise_grid(
            120, 80, RandomSource("bounded"), octaves=octaves, persistence=persistence
        )

        assert grid.values.min() >= 0.0
        assert grid.values.max() <= 1.0

    def test_grid_dimensions(self):
        """Test that the lattice size is ceil(size / step)."""
        grid = generate_noise_grid(100, 50, RandomSource("dims"), step=3)

        assert grid.grid_width == math.ceil(100 / 3)
        assert grid.grid_height == math.ceil(50 / 3)
        assert grid.values.shape == (17, 34)

    def test_deterministic(self):
        """Test that the same seed gives the same field."""
        grid1 = generate_noise_grid(64, 64, RandomSource("same"), octaves=5)
        grid2 = generate_noise_grid(64, 64, RandomSource("same"), octaves=5)
        np.testing.assert_array_equal(grid1.values, grid2.values)

    def test_coherent(self):
        """Test that neighbouring lattice values are close."""
        grid = generate_noise_grid(128, 128, RandomSource("smooth"), octaves=6, persistence=0.5)

        horizontal = np.abs(np.diff(grid.values, axis=1)).mean()
        vertical = np.abs(np.diff(grid.values, axis=0)).mean()
        # Uncorrelated uniform noise would average about 1/3
        assert horizontal < 0.1
        assert vertical < 0.1

    def test_immutable(self):
        """Test that grid values cannot be modified."""
        grid = generate_noise_grid(10, 10, RandomSource("frozen"))
        with pytest.raises(ValueError):
            grid.values[0, 0] = 0.5

    @pytest.mark.parametrize("kwargs", [
        {"octaves": 0},
        {"amplitude": 0},
        {"persistence": 0},
        {"step": 0},
    ])
    def test_invalid_parameters(self, kwargs):
        """Test that invalid parameters are rejected."""
        with pytest.raises(ValueError):
            generate_noise_grid(10, 10, RandomSource("bad"), **kwargs)

    def test_invalid_domain(self):
        with pytest.raises(ValueError):
            generate_noise_grid(0, 10, RandomSource("bad"))


class TestNoiseLookup:
    """Test sampling of noise grids by coordinate."""

    @pytest.fixture
    def grid(self):
        values = np.arange(12, dtype=float).reshape(3, 4) / 12
        return NoiseGrid(values=values, step=2.0)

    def test_index_formula(self, grid):
        """Test index = floor(y / step) * grid_width + floor(x / step)."""
        assert grid.index_of(7.5, 4.0) == 2 * 4 + 3
        assert grid.index_of(0.0, 0.0) == 0
        assert grid.sample(3.9, 1.9) == pytest.approx(1 / 12)

    @pytest.mark.parametrize("x,y", [(-0.1, 1), (8.0, 1), (1, 6.0), (1, -5), (100, 100)])
    def test_out_of_range_is_zero(self, grid, x, y):
        """Test that coordinates outside the lattice read as 0."""
        assert grid.index_of(x, y) is None
        assert grid.sample(x, y) == 0.0

    def test_no_row_wrap(self, grid):
        """Test that an x past the right edge does not read the next row."""
        assert grid.sample(9.0, 0.0) == 0.0

    def test_sample_points_matches_sample(self, grid):
        """Test that vectorised lookup matches scalar lookup."""
        points = np.array([[0, 0], [7.5, 4.0], [-1, 2], [3, 5.9], [8, 0]], dtype=float)
        expected = [grid.sample(x, y) for x, y in points]
        np.testing.assert_array_equal(grid.sample_points(points), expected)


class TestNoiseFieldSet:
    """Test the per-run field bundle."""

    def test_fields_are_independent(self):
        """Test that the four fields differ from each other."""
        config = NoiseConfig()
        fields = NoiseFieldSet.generate(200, 160, RandomSource("fields"), config)

        assert fields.elevation.step == config.elevation.step
        assert fields.warp.values.shape == (
            math.ceil(160 / config.warp.step), math.ceil(200 / config.warp.step)
        )
        assert not np.array_equal(fields.elevation.values[:10, :10], fields.detail.values[:10, :10])
