"""
Procedural island map generation from Voronoi cells and layered noise.
"""

from .config import ConfigurationError, MapConfig, SeedMode, load_map_config
from .core import MapResult, RandomSource, TerrainType, generate_map
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = ['ConfigurationError', 'MapConfig', 'SeedMode', 'load_map_config',
           'MapResult', 'RandomSource', 'TerrainType', 'generate_map',
           'configure_logging', '__version__']
