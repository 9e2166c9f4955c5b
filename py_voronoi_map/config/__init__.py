"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .map_config import (
    ConfigurationError,
    ElevationOptions,
    IslandOptions,
    MapConfig,
    NoiseConfig,
    NoiseOptions,
    SeedMode,
    SettlementOptions,
    TerrainThresholds,
    load_map_config,
)

__all__ = ['Settings', 'settings', 'ConfigurationError', 'ElevationOptions',
           'IslandOptions', 'MapConfig', 'NoiseConfig', 'NoiseOptions', 'SeedMode',
           'SettlementOptions', 'TerrainThresholds', 'load_map_config']
