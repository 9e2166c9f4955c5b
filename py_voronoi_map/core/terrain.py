"""
Terrain classification and shading.

Elevation is split into four ordered bands (ocean < plains < forest <
mountains). City is not a band; it is laid over settlement cells after
classification. Shading is cosmetic: a detail-noise sample scales the base
colour of a terrain type inside a range specific to that type.
"""

from enum import Enum
from typing import Dict, Tuple

import numpy as np

from ..config.map_config import ElevationOptions, TerrainThresholds


class TerrainType(str, Enum):
    """Terrain categories of a map cell."""

    OCEAN = "ocean"
    PLAINS = "plains"
    FOREST = "forest"
    MOUNTAINS = "mountains"
    CITY = "city"

    @property
    def color(self) -> str:
        return TERRAIN_COLORS[self]

    @property
    def band(self) -> int:
        """Rank in the elevation order; -1 for overlays."""
        return ELEVATION_BANDS.index(self) if self in ELEVATION_BANDS else -1


ELEVATION_BANDS = (
    TerrainType.OCEAN,
    TerrainType.PLAINS,
    TerrainType.FOREST,
    TerrainType.MOUNTAINS,
)

TERRAIN_COLORS: Dict[TerrainType, str] = {
    TerrainType.MOUNTAINS: "#808080",
    TerrainType.OCEAN: "#4F42B5",
    TerrainType.FOREST: "#228B22",
    TerrainType.PLAINS: "#90EE90",
    TerrainType.CITY: "#FF6347",
}

# (low, high) intensity multipliers per terrain type
SHADE_RANGES: Dict[TerrainType, Tuple[float, float]] = {
    TerrainType.OCEAN: (0.85, 1.1),
    TerrainType.PLAINS: (0.9, 1.1),
    TerrainType.FOREST: (0.75, 1.05),
    TerrainType.MOUNTAINS: (0.8, 1.25),
    TerrainType.CITY: (1.0, 1.0),
}

DEFAULT_THRESHOLDS = TerrainThresholds()


def classify(elevation: float, thresholds: TerrainThresholds = DEFAULT_THRESHOLDS) -> TerrainType:
    """Map an elevation in [0, 1] to its terrain band."""
    if elevation < thresholds.ocean:
        return TerrainType.OCEAN
    if elevation < thresholds.plains:
        return TerrainType.PLAINS
    if elevation < thresholds.forest:
        return TerrainType.FOREST
    return TerrainType.MOUNTAINS


def shade(terrain: TerrainType, detail_sample: float) -> float:
    """Colour intensity multiplier for a terrain type and detail-noise sample."""
    low, high = SHADE_RANGES[terrain]
    detail_sample = min(max(detail_sample, 0.0), 1.0)
    return low + (high - low) * detail_sample


def shade_color(terrain: TerrainType, multiplier: float) -> str:
    """Base colour of a terrain type with every channel scaled."""
    base = terrain.color.lstrip("#")
    channels = [int(base[i:i + 2], 16) for i in (0, 2, 4)]
    scaled = [min(255, max(0, int(round(c * multiplier)))) for c in channels]
    return "#{:02X}{:02X}{:02X}".format(*scaled)


def blend_elevation(elevation: np.ndarray, coast: np.ndarray, detail: np.ndarray,
                    options: ElevationOptions) -> np.ndarray:
    """
    Combine noise samples into one raw elevation per cell.

    Mixes in the coast field, adds centred detail jitter and stretches the
    result around 0.5 by ``options.contrast``. Output is clipped to [0, 1].
    """
    blended = (1 - options.coast_weight) * np.asarray(elevation) \
        + options.coast_weight * np.asarray(coast)
    blended = blended + options.detail_weight * (np.asarray(detail) - 0.5)
    blended = 0.5 + (blended - 0.5) * options.contrast
    return np.clip(blended, 0.0, 1.0)
