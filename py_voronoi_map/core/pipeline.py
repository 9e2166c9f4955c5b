"""
Map generation pipeline.

Runs one complete generation from a validated configuration:

1. Sample seed points (uniform, Poisson-disc, or Poisson-disc + Lloyd)
2. Tessellate into a bounded Voronoi diagram
3. Sample the noise fields at every cell centroid and blend an elevation
4. Gate elevation with the island mask and classify terrain
5. Place settlements, validate them against terrain, compute ownership

The result is an immutable ``MapResult``; nothing is cached between runs.
"""

import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import structlog

from ..config.map_config import MapConfig, SeedMode, load_map_config
from .island_mask import IslandMask, polar_coordinates, warp_angles
from .noise_field import NoiseFieldSet
from .random_source import RandomSource
from .relaxation import relax
from .sampling import sample_poisson_disc, sample_uniform
from .settlements import Settlement, SettlementPlacer, compute_ownership, validate_settlements
from .tessellation import DegenerateTriangulationError, TrianglePolygons, triangulate, voronoi
from .terrain import TerrainType, blend_elevation, classify, shade, shade_color

logger = structlog.get_logger()


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class MapResult:
    """
    Output of one generation run.

    Per-cell data is keyed by seed index. ``cell_polygons`` and
    ``centroids`` have one slot per seed, None for empty cells; the
    mappings only hold seeds that own a cell.
    """

    config: MapConfig
    seed: Union[str, int]
    seeds: np.ndarray
    cell_polygons: Tuple[Optional[np.ndarray], ...]
    centroids: Tuple[Optional[np.ndarray], ...]
    elevation_by_cell: Mapping[int, float]
    terrain_by_cell: Mapping[int, TerrainType]
    shade_by_cell: Mapping[int, float]
    settlements: Tuple[Settlement, ...]
    ownership: np.ndarray
    triangles: TrianglePolygons

    @property
    def cell_count(self) -> int:
        return len(self.terrain_by_cell)

    def land_cells(self) -> List[int]:
        return [i for i, terrain in self.terrain_by_cell.items() if terrain != TerrainType.OCEAN]

    def terrain_with_settlements(self) -> Dict[int, TerrainType]:
        """Terrain per cell with settlement cells overlaid as CITY."""
        terrain = dict(self.terrain_by_cell)
        for settlement in self.settlements:
            terrain[settlement.cell_id] = TerrainType.CITY
        return terrain

    def terrain_colors(self, with_settlements: bool = True) -> Dict[int, str]:
        """Shaded hex colour per cell."""
        terrain = self.terrain_with_settlements() if with_settlements else self.terrain_by_cell
        return {
            i: shade_color(kind, self.shade_by_cell.get(i, 1.0) if kind != TerrainType.CITY else 1.0)
            for i, kind in terrain.items()
        }

    def triangle_polygons(self) -> TrianglePolygons:
        return self.triangles


def sample_seeds(config: MapConfig, rng: RandomSource) -> np.ndarray:
    """Produce the seed set for the configured seed mode."""
    if config.seed_mode == SeedMode.UNIFORM:
        return sample_uniform(config.seed_count, config.width, config.height, rng)

    points = sample_poisson_disc(
        config.seed_count, config.width, config.height, config.poisson_radius, rng
    )
    if config.seed_mode == SeedMode.LLOYD:
        points = relax(points, config.lloyd_iterations, config.width, config.height)
    return points


def _empty_result(config: MapConfig, seed, seeds: np.ndarray) -> MapResult:
    n = len(seeds)
    return MapResult(
        config=config,
        seed=seed,
        seeds=_frozen(seeds),
        cell_polygons=(None,) * n,
        centroids=(None,) * n,
        elevation_by_cell=MappingProxyType({}),
        terrain_by_cell=MappingProxyType({}),
        shade_by_cell=MappingProxyType({}),
        settlements=(),
        ownership=_frozen(np.full(n, -1, dtype=np.int64)),
        triangles=TrianglePolygons(seeds, np.empty((0, 3), dtype=np.int64)),
    )


def generate_map(
    config: Union[MapConfig, Mapping[str, Any], None] = None,
    rng: Optional[RandomSource] = None,
    **overrides: Any,
) -> MapResult:
    """
    Generate a complete island map.

    Args:
        config: Map configuration, a mapping of its parameters, or None
        rng: Random source; by default one is created from ``config.seed``
        **overrides: Individual configuration parameters

    Returns:
        Immutable MapResult

    Raises:
        ConfigurationError: The configuration is invalid
    """
    config = load_map_config(config, **overrides)
    rng = rng or RandomSource(config.seed)
    start = time.perf_counter()

    logger.info(
        "Generating map",
        seed=rng.seed,
        seed_mode=config.seed_mode.value,
        seed_count=config.seed_count,
        width=config.width,
        height=config.height,
    )

    seeds = sample_seeds(config, rng)
    bounds = (0.0, 0.0, float(config.width), float(config.height))

    try:
        triangulation = triangulate(seeds)
    except DegenerateTriangulationError as exc:
        logger.warning("Not enough seed points to tessellate", points=exc.n_points)
        return _empty_result(config, rng.seed, seeds)

    diagram = voronoi(triangulation, bounds)
    valid = diagram.valid_indices()
    centroids = np.array([diagram.centroid(i) for i in valid], dtype=np.float64).reshape(-1, 2)

    fields = NoiseFieldSet.generate(config.width, config.height, rng, config.noise)
    detail = fields.detail.sample_points(centroids)
    raw_elevation = blend_elevation(
        fields.elevation.sample_points(centroids),
        fields.coast.sample_points(centroids),
        detail,
        config.elevation,
    )

    mask = IslandMask.random(rng, config.island)
    theta, distance = polar_coordinates(centroids, config.width, config.height)
    if config.island.angular_warp_strength > 0:
        theta = warp_angles(theta, fields.warp.sample_points(centroids),
                            config.island.angular_warp_strength)
    elevation = mask.apply_many(raw_elevation, theta, distance)

    elevation_by_cell = {}
    terrain_by_cell = {}
    shade_by_cell = {}
    for pos, cell_id in enumerate(valid):
        terrain = classify(float(elevation[pos]), config.thresholds)
        elevation_by_cell[cell_id] = float(elevation[pos])
        terrain_by_cell[cell_id] = terrain
        shade_by_cell[cell_id] = shade(terrain, float(detail[pos]))

    placer = SettlementPlacer(rng, config.settlements)
    placed = placer.place(diagram.centroids())
    settlements = validate_settlements(placed, terrain_by_cell)
    ownership = compute_ownership(diagram.centroids(), settlements)

    land = sum(1 for t in terrain_by_cell.values() if t != TerrainType.OCEAN)
    logger.info(
        "Map generated",
        seeds=len(seeds),
        cells=len(valid),
        land_cells=land,
        settlements=len(settlements),
        elapsed_seconds=round(time.perf_counter() - start, 3),
    )

    return MapResult(
        config=config,
        seed=rng.seed,
        seeds=_frozen(seeds),
        cell_polygons=tuple(diagram.cell_polygons()),
        centroids=tuple(diagram.centroids()),
        elevation_by_cell=MappingProxyType(elevation_by_cell),
        terrain_by_cell=MappingProxyType(terrain_by_cell),
        shade_by_cell=MappingProxyType(shade_by_cell),
        settlements=tuple(settlements),
        ownership=_frozen(ownership),
        triangles=triangulation.triangle_polygons(),
    )
