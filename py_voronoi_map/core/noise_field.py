"""
Multi-octave value noise on a regular lattice.

A lattice of white noise is resampled at several periods (1, 2, 4, ... cells)
with bilinear interpolation, and the resampled layers are summed with
geometrically decreasing weights. The result is normalised by the total
weight, so every value stays inside [0, 1].

Each map run builds four independent fields:

- elevation: the base height of every cell
- coast: large-scale shape variation blended into elevation
- detail: fine variation used for colour shading and elevation jitter
- warp: low-frequency field that bends the island outline
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from ..config.map_config import NoiseConfig, NoiseOptions
from .random_source import RandomSource

logger = structlog.get_logger()


@dataclass(frozen=True)
class NoiseGrid:
    """
    Immutable noise lattice sampled by continuous coordinates.

    ``values`` has shape (grid_height, grid_width). A coordinate maps to
    the lattice cell ``(floor(y / step), floor(x / step))``; coordinates
    outside the lattice read as 0.0.
    """

    values: np.ndarray
    step: float

    @property
    def grid_width(self) -> int:
        return self.values.shape[1]

    @property
    def grid_height(self) -> int:
        return self.values.shape[0]

    def index_of(self, x: float, y: float) -> Optional[int]:
        """Flat lattice index of a coordinate, or None outside the lattice."""
        col = math.floor(x / self.step)
        row = math.floor(y / self.step)
        if not (0 <= col < self.grid_width and 0 <= row < self.grid_height):
            return None
        return row * self.grid_width + col

    def sample(self, x: float, y: float) -> float:
        index = self.index_of(x, y)
        if index is None:
            return 0.0
        return float(self.values.flat[index])

    def sample_points(self, points: np.ndarray) -> np.ndarray:
        """Vectorised ``sample`` over an (n, 2) coordinate array."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        cols = np.floor(points[:, 0] / self.step)
        rows = np.floor(points[:, 1] / self.step)
        inside = (
            (cols >= 0) & (cols < self.grid_width)
            & (rows >= 0) & (rows < self.grid_height)
        )
        result = np.zeros(len(points), dtype=np.float64)
        result[inside] = self.values[rows[inside].astype(np.int64), cols[inside].astype(np.int64)]
        return result


def _smooth_octave(white: np.ndarray, octave: int) -> np.ndarray:
    """Bilinearly resample white noise at a period of 2**octave cells."""
    height, width = white.shape
    period = 1 << octave

    i = np.arange(width)
    i0 = (i // period) * period
    i1 = (i0 + period) % width
    h_blend = (i - i0) / period

    j = np.arange(height)
    j0 = (j // period) * period
    j1 = (j0 + period) % height
    v_blend = ((j - j0) / period)[:, None]

    top = white[np.ix_(j0, i0)] * (1 - h_blend) + white[np.ix_(j0, i1)] * h_blend
    bottom = white[np.ix_(j1, i0)] * (1 - h_blend) + white[np.ix_(j1, i1)] * h_blend
    return top * (1 - v_blend) + bottom * v_blend


def generate_noise_grid(
    width: float,
    height: float,
    rng: RandomSource,
    octaves: int = 4,
    amplitude: float = 0.1,
    persistence: float = 0.2,
    step: float = 1.0,
) -> NoiseGrid:
    """
    Generate a coherent noise grid covering a width x height domain.

    Args:
        width: Domain width
        height: Domain height
        rng: Random source for the white noise lattice
        octaves: Number of octaves to sum
        amplitude: Starting amplitude, multiplied by persistence per octave
        persistence: Amplitude ratio between successive octaves
        step: Domain units per lattice cell

    Returns:
        NoiseGrid with values in [0, 1]
    """
    if octaves < 1:
        raise ValueError(f"octaves must be at least 1, got {octaves}")
    if width <= 0 or height <= 0 or step <= 0:
        raise ValueError(f"Invalid noise domain: width={width}, height={height}, step={step}")
    if amplitude <= 0 or persistence <= 0:
        raise ValueError(
            f"amplitude and persistence must be positive, got {amplitude}, {persistence}"
        )

    grid_w = int(math.ceil(width / step))
    grid_h = int(math.ceil(height / step))
    white = rng.numpy_generator().random((grid_h, grid_w))

    result = np.zeros((grid_h, grid_w), dtype=np.float64)
    total_amplitude = 0.0
    # Coarsest octave first, so it carries the largest weight
    for octave in range(octaves - 1, -1, -1):
        amplitude *= persistence
        total_amplitude += amplitude
        result += _smooth_octave(white, octave) * amplitude

    result /= total_amplitude
    np.clip(result, 0.0, 1.0, out=result)
    result.setflags(write=False)

    return NoiseGrid(values=result, step=step)


def generate_from_options(width: float, height: float, rng: RandomSource,
                          options: NoiseOptions) -> NoiseGrid:
    return generate_noise_grid(
        width,
        height,
        rng,
        octaves=options.octaves,
        amplitude=options.amplitude,
        persistence=options.persistence,
        step=options.step,
    )


@dataclass(frozen=True)
class NoiseFieldSet:
    """The independent noise fields of one generation run."""

    elevation: NoiseGrid
    coast: NoiseGrid
    detail: NoiseGrid
    warp: NoiseGrid

    @classmethod
    def generate(cls, width: float, height: float, rng: RandomSource,
                 config: NoiseConfig) -> "NoiseFieldSet":
        fields = cls(
            elevation=generate_from_options(width, height, rng, config.elevation),
            coast=generate_from_options(width, height, rng, config.coast),
            detail=generate_from_options(width, height, rng, config.detail),
            warp=generate_from_options(width, height, rng, config.warp),
        )
        logger.info(
            "Noise fields generated",
            elevation_grid=fields.elevation.values.shape,
            coast_grid=fields.coast.values.shape,
            detail_grid=fields.detail.values.shape,
            warp_grid=fields.warp.values.shape,
        )
        return fields
