"""End-to-end tests for map generation."""

import pytest
import numpy as np

from py_voronoi_map import ConfigurationError, MapConfig, SeedMode, generate_map
from py_voronoi_map.core.island_mask import polar_coordinates
from py_voronoi_map.core.random_source import RandomSource
from py_voronoi_map.core.terrain import TERRAIN_COLORS, TerrainType


@pytest.fixture(scope="module")
def uniform_map():
    config = MapConfig(seed_count=300, width=400, height=300,
                       seed_mode=SeedMode.UNIFORM, seed="uniform-map")
    return generate_map(config)


@pytest.fixture(scope="module")
def lloyd_map():
    config = MapConfig(seed_count=250, width=400, height=300, seed_mode=SeedMode.LLOYD,
                       poisson_radius=12, lloyd_iterations=2, seed="lloyd-map")
    return generate_map(config)


class TestGenerateMap:
    """Test complete generation runs."""

    def test_per_seed_slots(self, uniform_map):
        """Test that every seed index has a polygon slot."""
        assert len(uniform_map.seeds) == 300
        assert len(uniform_map.cell_polygons) == 300
        assert len(uniform_map.centroids) == 300
        assert len(uniform_map.ownership) == 300

    def test_terrain_keyed_by_cells(self, uniform_map):
        """Test that terrain exists exactly for seeds owning a cell."""
        with_cells = {i for i, polygon in enumerate(uniform_map.cell_polygons) if polygon is not None}
        assert set(uniform_map.terrain_by_cell) == with_cells
        assert set(uniform_map.elevation_by_cell) == with_cells

    def test_elevation_bounded(self, uniform_map):
        values = np.array(list(uniform_map.elevation_by_cell.values()))
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_has_land_and_ocean(self, uniform_map):
        kinds = set(uniform_map.terrain_by_cell.values())
        assert TerrainType.OCEAN in kinds
        assert len(uniform_map.land_cells()) > 0

    def test_map_corners_are_ocean(self, uniform_map):
        """Test that cells far from the centre lie outside the island."""
        for i, centroid in enumerate(uniform_map.centroids):
            if centroid is None:
                continue
            _, distance = polar_coordinates(centroid, 400, 300)
            if distance[0] > 0.9:
                assert uniform_map.terrain_by_cell[i] == TerrainType.OCEAN

    def test_settlements_on_land(self, uniform_map):
        for settlement in uniform_map.settlements:
            assert uniform_map.terrain_by_cell[settlement.cell_id] != TerrainType.OCEAN
            np.testing.assert_array_equal(settlement.site, uniform_map.centroids[settlement.cell_id])

    def test_ownership(self, uniform_map):
        """Test that ownership points at valid settlements for every cell."""
        owners = uniform_map.ownership
        if uniform_map.settlements:
            for i, centroid in enumerate(uniform_map.centroids):
                if centroid is None:
                    assert owners[i] == -1
                else:
                    assert 0 <= owners[i] < len(uniform_map.settlements)
        else:
            assert np.all(owners == -1)

    def test_city_overlay(self, uniform_map):
        terrain = uniform_map.terrain_with_settlements()
        colors = uniform_map.terrain_colors()
        for settlement in uniform_map.settlements:
            assert terrain[settlement.cell_id] == TerrainType.CITY
            assert colors[settlement.cell_id] == TERRAIN_COLORS[TerrainType.CITY]

    def test_triangle_polygons(self, uniform_map):
        triangles = list(uniform_map.triangle_polygons())
        assert len(triangles) == len(uniform_map.triangle_polygons()) > 0

    def test_result_is_read_only(self, uniform_map):
        with pytest.raises(TypeError):
            uniform_map.terrain_by_cell[0] = TerrainType.CITY
        with pytest.raises(ValueError):
            uniform_map.seeds[0, 0] = 1.0
        with pytest.raises(AttributeError):
            uniform_map.settlements = ()

    def test_deterministic(self):
        """Test that the same seed reproduces the whole map."""
        config = MapConfig(seed_count=80, width=300, height=200,
                           seed_mode=SeedMode.POISSON_DISC, poisson_radius=15, seed=7)
        map1 = generate_map(config)
        map2 = generate_map(config)

        np.testing.assert_array_equal(map1.seeds, map2.seeds)
        assert dict(map1.terrain_by_cell) == dict(map2.terrain_by_cell)
        assert [s.name for s in map1.settlements] == [s.name for s in map2.settlements]

    def test_injected_random_source(self):
        """Test that an explicit random source overrides the config seed."""
        config = MapConfig(seed_count=60, width=200, height=200, seed_mode=SeedMode.UNIFORM)
        map1 = generate_map(config, rng=RandomSource("injected"))
        map2 = generate_map(config, rng=RandomSource("injected"))

        assert map1.seed == "injected"
        np.testing.assert_array_equal(map1.seeds, map2.seeds)

    def test_lloyd_mode(self, lloyd_map):
        assert 3 <= len(lloyd_map.seeds) <= 250
        assert lloyd_map.cell_count <= len(lloyd_map.seeds)

    def test_poisson_mode_underfill(self):
        """Test that a saturated Poisson-disc run uses the points it got."""
        result = generate_map(seed_count=1000, width=100, height=100,
                              seed_mode="poisson_disc", poisson_radius=25, seed="few")
        assert 1 <= len(result.seeds) < 1000
        assert len(result.cell_polygons) == len(result.seeds)

    def test_too_few_seeds(self):
        """Test that fewer than 3 seeds produce an empty map, not an error."""
        result = generate_map(seed_count=2, seed_mode="uniform", seed="tiny")

        assert len(result.seeds) == 2
        assert result.cell_count == 0
        assert result.settlements == ()
        assert list(result.triangle_polygons()) == []

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            generate_map(width=-1)

    @pytest.mark.parametrize("mode", list(SeedMode))
    def test_infinite_dimensions_rejected(self, mode):
        """Test that non-finite sizes fail before any sampling starts."""
        with pytest.raises(ConfigurationError):
            generate_map(width=float("inf"), seed_mode=mode, seed="inf")
        with pytest.raises(ConfigurationError):
            generate_map(height=float("nan"), seed_mode=mode, seed="nan")
