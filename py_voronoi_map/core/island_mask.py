"""
Island outline: radial admission with angular shape perturbation.

For a point at angle ``theta`` and normalised distance ``d`` from the map
centre, the outline radius is::

    r(theta) = base_radius + sum(a_i * sin(f_i * theta + phi_i)) + w * sin(theta + phi_w)

Points beyond ``r`` are ocean. Inside the outer edge band the elevation is
faded linearly to zero so the coastline is smooth. The mask keeps no state
between evaluations.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from ..config.map_config import IslandOptions
from .random_source import RandomSource

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class Harmonic:
    """One sinusoidal term of the outline radius."""

    frequency: int
    phase: float
    amplitude: float

    def __call__(self, theta: ArrayLike) -> ArrayLike:
        return self.amplitude * np.sin(self.frequency * theta + self.phase)


@dataclass(frozen=True)
class IslandMask:
    """Radial land mask with a harmonic outline."""

    base_radius: float
    harmonics: Tuple[Harmonic, ...] = ()
    warp: Optional[Harmonic] = None
    edge_band: float = 0.15

    @classmethod
    def random(cls, rng: RandomSource, options: IslandOptions) -> "IslandMask":
        """Draw outline terms for a new island."""
        harmonics = tuple(
            Harmonic(
                frequency=rng.randint(options.min_frequency, options.max_frequency),
                phase=rng.angle(),
                amplitude=rng.uniform(0.3, 1.0) * options.harmonic_amplitude,
            )
            for _ in range(options.harmonic_count)
        )
        warp = None
        if options.use_warp:
            warp = Harmonic(frequency=1, phase=rng.angle(), amplitude=options.warp_amplitude)
        return cls(
            base_radius=options.base_radius,
            harmonics=harmonics,
            warp=warp,
            edge_band=options.edge_band,
        )

    def target_radius(self, theta: ArrayLike) -> ArrayLike:
        """Outline radius at an angle (radians)."""
        radius = self.base_radius
        for harmonic in self.harmonics:
            radius = radius + harmonic(theta)
        if self.warp is not None:
            radius = radius + self.warp(theta)
        return radius

    def factor(self, theta: ArrayLike, distance: ArrayLike) -> np.ndarray:
        """Multiplier in [0, 1] applied to elevation at (theta, distance)."""
        radius = np.asarray(self.target_radius(theta), dtype=np.float64)
        distance = np.asarray(distance, dtype=np.float64)
        band_start = (1 - self.edge_band) * radius

        with np.errstate(divide="ignore", invalid="ignore"):
            fade = (radius - distance) / (radius - band_start)
        factor = np.where(distance > band_start, fade, 1.0)
        factor = np.where((radius <= 0) | (distance > radius), 0.0, factor)
        return np.clip(factor, 0.0, 1.0)

    def apply(self, elevation: float, theta: float, distance: float) -> float:
        """Masked elevation of a single point."""
        return float(elevation * self.factor(theta, distance))

    def apply_many(self, elevation: np.ndarray, theta: np.ndarray,
                   distance: np.ndarray) -> np.ndarray:
        return np.asarray(elevation, dtype=np.float64) * self.factor(theta, distance)

    def admits(self, theta: float, distance: float) -> bool:
        """True when the point lies inside the island outline."""
        radius = float(self.target_radius(theta))
        return radius > 0 and distance <= radius


def polar_coordinates(points: np.ndarray, width: float, height: float):
    """
    Angle and normalised distance of points from the map centre.

    Distances are divided by the centre-to-corner distance, so the map
    corners sit at exactly 1.0.

    Returns:
        Tuple of (theta, distance) arrays
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    cx, cy = width / 2, height / 2
    max_dist = math.sqrt(cx**2 + cy**2)

    dx = points[:, 0] - cx
    dy = points[:, 1] - cy
    theta = np.arctan2(dy, dx)
    distance = np.sqrt(dx**2 + dy**2) / max_dist
    return theta, distance


def warp_angles(theta: np.ndarray, warp_samples: np.ndarray, strength: float) -> np.ndarray:
    """Bend angles by a noise field sampled at the same points."""
    return theta + strength * (2 * np.asarray(warp_samples) - 1)
