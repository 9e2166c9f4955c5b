"""Lloyd's relaxation over bounded Voronoi diagrams."""

import numpy as np
import structlog

from .tessellation import DegenerateTriangulationError, triangulate, voronoi

logger = structlog.get_logger()


def relax(points: np.ndarray, iterations: int, width: float, height: float) -> np.ndarray:
    """Apply Lloyd's relaxation to even out a point distribution.

    Each round builds a fresh triangulation and moves every point to the
    centroid of its Voronoi cell, clamped to the map bounds. Points whose cell
    is empty are dropped, so the result can be shorter than the input. When
    fewer than 3 points are left to triangulate, relaxation stops and the last
    set that could be triangulated is returned.

    Args:
        points: Seed points to relax
        iterations: Number of relaxation rounds
        width: Map width
        height: Map height

    Returns:
        Relaxed point coordinates
    """
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")

    points = np.array(points, dtype=np.float64).reshape(-1, 2)
    bounds = (0.0, 0.0, float(width), float(height))

    logger.info("Starting Lloyd's relaxation", iterations=iterations, points=len(points))

    for iteration in range(iterations):
        try:
            diagram = voronoi(triangulate(points), bounds)
        except DegenerateTriangulationError as exc:
            logger.warning(
                "Relaxation stopped early",
                iteration=iteration,
                points=exc.n_points,
            )
            break

        centroids = [cell.centroid for cell in diagram.cells if cell.centroid is not None]
        relaxed = np.array(centroids, dtype=np.float64).reshape(-1, 2)
        relaxed[:, 0] = np.clip(relaxed[:, 0], 0, width)
        relaxed[:, 1] = np.clip(relaxed[:, 1], 0, height)

        if len(relaxed) < 3:
            logger.warning(
                "Relaxation stopped early",
                iteration=iteration,
                points=len(relaxed),
            )
            break

        dropped = len(points) - len(relaxed)
        points = relaxed
        logger.debug(f"Relaxation iteration {iteration + 1} complete", dropped=dropped)

    return points
