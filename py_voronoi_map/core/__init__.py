"""
Core map generation functionality.
"""

from .random_source import RandomSource
from .sampling import sample_uniform, sample_poisson_disc
from .tessellation import (CellData, DegenerateTriangulationError, Triangulation,
                           VoronoiDiagram, triangulate, voronoi)
from .relaxation import relax
from .noise_field import NoiseGrid, NoiseFieldSet, generate_noise_grid
from .island_mask import IslandMask, polar_coordinates
from .terrain import TerrainType, classify, shade, shade_color
from .name_generator import NameGenerator, NameParts
from .settlements import Settlement, SettlementPlacer, compute_ownership, validate_settlements
from .pipeline import MapResult, generate_map

__all__ = ['RandomSource', 'sample_uniform', 'sample_poisson_disc',
           'CellData', 'DegenerateTriangulationError', 'Triangulation', 'VoronoiDiagram',
           'triangulate', 'voronoi', 'relax',
           'NoiseGrid', 'NoiseFieldSet', 'generate_noise_grid',
           'IslandMask', 'polar_coordinates',
           'TerrainType', 'classify', 'shade', 'shade_color',
           'NameGenerator', 'NameParts',
           'Settlement', 'SettlementPlacer', 'compute_ownership', 'validate_settlements',
           'MapResult', 'generate_map']
