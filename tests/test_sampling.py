"""Tests for seed point sampling."""

import pytest
import numpy as np
from scipy.spatial.distance import pdist

from py_voronoi_map.core.random_source import RandomSource
from py_voronoi_map.core.sampling import sample_poisson_disc, sample_uniform


class TestUniformSampling:
    """Test uniform random sampling."""

    def test_exact_count(self):
        """Test that uniform sampling always returns the requested count."""
        points = sample_uniform(30, 800, 600, RandomSource("count"))
        assert points.shape == (30, 2)

    def test_point_bounds(self):
        """Test that all points are within [0, width) x [0, height)."""
        points = sample_uniform(1000, 800, 600, RandomSource("bounds"))

        assert np.all(points[:, 0] >= 0)
        assert np.all(points[:, 0] < 800)
        assert np.all(points[:, 1] >= 0)
        assert np.all(points[:, 1] < 600)

    def test_determinism_with_seed(self):
        """Same seed gives identical point sequences (seed 42, 30 points)."""
        points1 = sample_uniform(30, 800, 600, RandomSource(42))
        points2 = sample_uniform(30, 800, 600, RandomSource(42))

        np.testing.assert_array_equal(points1, points2)

    def test_zero_count(self):
        """Test that zero points is an empty set, not an error."""
        assert sample_uniform(0, 800, 600, RandomSource("zero")).shape == (0, 2)

    def test_negative_count(self):
        """Test that a negative count is rejected."""
        with pytest.raises(ValueError):
            sample_uniform(-1, 800, 600, RandomSource("neg"))


class TestPoissonDiscSampling:
    """Test blue-noise sampling."""

    def test_minimum_distance(self):
        """Test that no two points are closer than the radius."""
        points = sample_poisson_disc(300, 400, 300, 15, RandomSource("spacing"))

        assert len(points) > 1
        assert pdist(points).min() >= 15 - 1e-9

    def test_large_domain(self):
        """500 points at radius 20 on 1920x1080 terminates with valid spacing."""
        points = sample_poisson_disc(500, 1920, 1080, 20, RandomSource("large"))

        assert 1 <= len(points) <= 500
        assert pdist(points).min() >= 20 - 1e-9

    def test_points_in_domain(self):
        """Test that every accepted point lies inside the domain."""
        points = sample_poisson_disc(200, 300, 200, 10, RandomSource("domain"))

        assert np.all(points >= 0)
        assert np.all(points[:, 0] < 300)
        assert np.all(points[:, 1] < 200)

    def test_under_fill_is_not_an_error(self):
        """Test that a saturated domain returns fewer points than requested."""
        points = sample_poisson_disc(1000, 100, 100, 30, RandomSource("saturate"))

        # At most a handful of 30-unit discs fit in a 100x100 square
        assert 1 <= len(points) < 1000
        assert pdist(points).min() >= 30 - 1e-9

    def test_count_respected(self):
        """Test that sampling stops once count points are placed."""
        points = sample_poisson_disc(10, 1000, 1000, 5, RandomSource("stop"))
        assert len(points) == 10

    def test_deterministic(self):
        """Test that the same seed reproduces the same sample."""
        points1 = sample_poisson_disc(100, 400, 400, 20, RandomSource("repeat"))
        points2 = sample_poisson_disc(100, 400, 400, 20, RandomSource("repeat"))
        np.testing.assert_array_equal(points1, points2)

    def test_zero_count(self):
        """Test that zero requested points returns an empty set."""
        assert sample_poisson_disc(0, 100, 100, 5, RandomSource("z")).shape == (0, 2)

    def test_invalid_radius(self):
        """Test that a non-positive radius is rejected."""
        with pytest.raises(ValueError):
            sample_poisson_disc(10, 100, 100, 0, RandomSource("r"))
