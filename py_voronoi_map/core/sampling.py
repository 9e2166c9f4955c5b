"""
Seed point sampling.

Two independent strategies produce the seed set a map is built from:

1. ``sample_uniform`` - white noise, every coordinate drawn independently
2. ``sample_poisson_disc`` - blue noise (Bridson's algorithm), no two points
   closer than a given radius

Both return ``(n, 2)`` float arrays. Poisson-disc sampling may return fewer
points than requested once the domain is saturated; callers must use the
returned length.
"""

import math

import numpy as np
import structlog

from .random_source import RandomSource

logger = structlog.get_logger()

# Candidates tried around an active point before it is retired
POISSON_ATTEMPTS = 30


def sample_uniform(count: int, width: float, height: float, rng: RandomSource) -> np.ndarray:
    """
    Generate uniformly distributed points.

    Args:
        count: Number of points to generate
        width: Domain width
        height: Domain height
        rng: Random source

    Returns:
        Array of [x, y] point coordinates with exactly ``count`` rows
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    points = np.empty((count, 2), dtype=np.float64)
    for i in range(count):
        points[i, 0] = rng.random() * width
        points[i, 1] = rng.random() * height

    logger.debug("Uniform sampling complete", count=count, width=width, height=height)
    return points


def sample_poisson_disc(
    count: int,
    width: float,
    height: float,
    radius: float,
    rng: RandomSource,
    attempts: int = POISSON_ATTEMPTS,
) -> np.ndarray:
    """
    Generate blue-noise points with a guaranteed minimum spacing.

    A background grid with cells of size ``radius / sqrt(2)`` holds at most
    one point per cell, so checking a candidate only needs the 5x5 block of
    cells around it.

    Args:
        count: Maximum number of points to place
        width: Domain width
        height: Domain height
        radius: Minimum distance between any two points
        rng: Random source
        attempts: Candidates tried per active point before retiring it

    Returns:
        Array of [x, y] point coordinates, at most ``count`` rows
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    if count <= 0:
        return np.empty((0, 2), dtype=np.float64)

    cell_size = radius / math.sqrt(2)
    grid_w = int(math.ceil(width / cell_size))
    grid_h = int(math.ceil(height / cell_size))
    # -1 marks an empty grid cell, otherwise the index into `points`
    grid = np.full((grid_h, grid_w), -1, dtype=np.int64)
    radius_sq = radius * radius

    points = []
    active = []

    def grid_coords(x: float, y: float):
        return int(y / cell_size), int(x / cell_size)

    def is_far_enough(x: float, y: float) -> bool:
        row, col = grid_coords(x, y)
        for r in range(max(row - 2, 0), min(row + 3, grid_h)):
            for c in range(max(col - 2, 0), min(col + 3, grid_w)):
                idx = grid[r, c]
                if idx < 0:
                    continue
                px, py = points[idx]
                dx = px - x
                dy = py - y
                if dx * dx + dy * dy < radius_sq:
                    return False
        return True

    def place(x: float, y: float) -> None:
        row, col = grid_coords(x, y)
        grid[row, col] = len(points)
        active.append(len(points))
        points.append((x, y))

    place(rng.random() * width, rng.random() * height)

    while active and len(points) < count:
        slot = int(rng.random() * len(active))
        sx, sy = points[active[slot]]

        for _ in range(attempts):
            angle = rng.angle()
            distance = radius * (1 + rng.random())
            x = sx + distance * math.cos(angle)
            y = sy + distance * math.sin(angle)
            if 0 <= x < width and 0 <= y < height and is_far_enough(x, y):
                place(x, y)
                break
        else:
            # Exhausted: swap-remove from the active list
            active[slot] = active[-1]
            active.pop()

    logger.info(
        "Poisson-disc sampling complete",
        requested=count,
        placed=len(points),
        radius=radius,
        saturated=len(points) < count,
    )
    return np.array(points, dtype=np.float64).reshape(-1, 2)
