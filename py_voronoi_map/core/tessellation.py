"""
Delaunay triangulation and bounded Voronoi diagrams.

The triangulation comes from ``scipy.spatial.Delaunay``. Voronoi cells are
built from it directly: a site's cell is the bounding rectangle clipped by
the perpendicular-bisector half-plane of every Delaunay neighbour. This gives
exactly clipped, convex cells without the infinite regions that
``scipy.spatial.Voronoi`` produces along the hull.

Per-site results are kept in a sparse list of ``CellData`` keyed by the seed
index. Sites that contribute no area (exact duplicates, sites whose cell
falls outside the bounds) keep their slot with ``polygon=None``.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import Delaunay, QhullError

logger = structlog.get_logger()

Bounds = Tuple[float, float, float, float]

# Cells smaller than this fraction of the bounds area count as empty
MIN_CELL_AREA_FRACTION = 1e-12


class DegenerateTriangulationError(ValueError):
    """Raised when a point set is too small to triangulate."""

    def __init__(self, n_points: int):
        super().__init__(f"Triangulation needs at least 3 points, got {n_points}")
        self.n_points = n_points


@dataclass(frozen=True)
class CellData:
    """Voronoi cell of one seed; polygon and centroid are None for empty cells."""

    index: int
    polygon: Optional[np.ndarray]
    centroid: Optional[np.ndarray]

    @property
    def is_empty(self) -> bool:
        return self.polygon is None


class TrianglePolygons:
    """
    Lazy view over the triangles of a triangulation.

    Each iteration starts from the first triangle again and yields a fresh
    (3, 2) coordinate array per triangle.
    """

    def __init__(self, points: np.ndarray, triangles: np.ndarray):
        self._points = points
        self._triangles = triangles

    def __iter__(self) -> Iterator[np.ndarray]:
        for triangle in self._triangles:
            yield self._points[triangle]

    def __len__(self) -> int:
        return len(self._triangles)


class Triangulation:
    """Delaunay triangulation of a seed set with per-vertex neighbour lists."""

    def __init__(
        self,
        points: np.ndarray,
        triangles: np.ndarray,
        neighbors: List[np.ndarray],
        vertex_mask: np.ndarray,
        collinear: bool = False,
    ):
        self.points = points
        self.triangles = triangles
        self._neighbors = neighbors
        self._vertex_mask = vertex_mask
        self.collinear = collinear

    def __len__(self) -> int:
        return len(self.points)

    def neighbors(self, index: int) -> np.ndarray:
        """Indices of the Delaunay neighbours of a point."""
        return self._neighbors[index]

    def is_vertex(self, index: int) -> bool:
        """False for points left out of the triangulation (duplicates)."""
        return bool(self._vertex_mask[index])

    def triangle_polygons(self) -> TrianglePolygons:
        return TrianglePolygons(self.points, self.triangles)

    def voronoi(self, bounds: Bounds) -> "VoronoiDiagram":
        return voronoi(self, bounds)


class VoronoiDiagram:
    """Voronoi diagram clipped to a rectangle."""

    def __init__(self, triangulation: Triangulation, bounds: Bounds, cells: List[CellData]):
        self.triangulation = triangulation
        self.bounds = bounds
        self.cells = cells

    def __len__(self) -> int:
        return len(self.cells)

    def cell_polygon(self, index: int) -> Optional[np.ndarray]:
        return self.cells[index].polygon

    def centroid(self, index: int) -> Optional[np.ndarray]:
        return self.cells[index].centroid

    def valid_indices(self) -> List[int]:
        """Seed indices that own a non-empty cell."""
        return [cell.index for cell in self.cells if not cell.is_empty]

    def cell_polygons(self) -> List[Optional[np.ndarray]]:
        return [cell.polygon for cell in self.cells]

    def centroids(self) -> List[Optional[np.ndarray]]:
        return [cell.centroid for cell in self.cells]

    def triangle_polygons(self) -> TrianglePolygons:
        return self.triangulation.triangle_polygons()


def triangulate(points: Sequence) -> Triangulation:
    """
    Build a Delaunay triangulation.

    Duplicate points are tolerated: Qhull leaves them out of every triangle
    and they end up with no neighbours and no cell. A fully collinear set has
    no triangles; its neighbour graph links consecutive points along the line.

    Args:
        points: Sequence of [x, y] coordinates

    Returns:
        Triangulation of the points

    Raises:
        DegenerateTriangulationError: Fewer than 3 points were given
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    n_points = len(points)
    if n_points < 3:
        raise DegenerateTriangulationError(n_points)

    try:
        delaunay = Delaunay(points)
    except QhullError:
        logger.debug("Qhull rejected input as flat, using collinear fallback", n_points=n_points)
        return _collinear_triangulation(points)

    indptr, indices = delaunay.vertex_neighbor_vertices
    neighbors = [indices[indptr[i]:indptr[i + 1]] for i in range(n_points)]

    vertex_mask = np.zeros(n_points, dtype=bool)
    vertex_mask[np.unique(delaunay.simplices)] = True

    return Triangulation(
        points=points,
        triangles=delaunay.simplices.copy(),
        neighbors=neighbors,
        vertex_mask=vertex_mask,
    )


def _collinear_triangulation(points: np.ndarray) -> Triangulation:
    """Neighbour graph for points that all lie on one line."""
    n_points = len(points)
    _, first_idx = np.unique(points, axis=0, return_index=True)
    first_idx = np.sort(first_idx)

    vertex_mask = np.zeros(n_points, dtype=bool)
    vertex_mask[first_idx] = True
    neighbors = [np.empty(0, dtype=np.int64) for _ in range(n_points)]

    if len(first_idx) > 1:
        unique_points = points[first_idx]
        spread = unique_points - unique_points[0]
        direction = spread[np.argmax(np.einsum("ij,ij->i", spread, spread))]
        order = first_idx[np.argsort(spread @ direction)]
        for pos, idx in enumerate(order):
            adjacent = []
            if pos > 0:
                adjacent.append(order[pos - 1])
            if pos < len(order) - 1:
                adjacent.append(order[pos + 1])
            neighbors[idx] = np.array(adjacent, dtype=np.int64)

    return Triangulation(
        points=points,
        triangles=np.empty((0, 3), dtype=np.int64),
        neighbors=neighbors,
        vertex_mask=vertex_mask,
        collinear=True,
    )


def voronoi(triangulation: Triangulation, bounds: Bounds) -> VoronoiDiagram:
    """
    Derive the Voronoi diagram of a triangulation, clipped to a rectangle.

    Args:
        triangulation: Delaunay triangulation of the seeds
        bounds: Clipping rectangle as (x0, y0, x1, y1)

    Returns:
        Diagram with one CellData per seed
    """
    x0, y0, x1, y1 = bounds
    if x1 <= x0 or y1 <= y0:
        raise ValueError(f"Invalid bounds: {bounds}")

    rectangle = np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]], dtype=np.float64)
    min_area = (x1 - x0) * (y1 - y0) * MIN_CELL_AREA_FRACTION
    points = triangulation.points

    cells = []
    for i in range(len(points)):
        polygon = None
        if triangulation.is_vertex(i):
            polygon = _clip_cell(points, i, triangulation.neighbors(i), rectangle)
            if len(polygon) < 3 or polygon_area(polygon) <= min_area:
                polygon = None

        centroid = compute_polygon_centroid(polygon) if polygon is not None else None
        cells.append(CellData(index=i, polygon=polygon, centroid=centroid))

    empty = sum(1 for cell in cells if cell.is_empty)
    logger.debug("Voronoi diagram built", cells=len(cells), empty_cells=empty)
    return VoronoiDiagram(triangulation, tuple(bounds), cells)


def _clip_cell(points: np.ndarray, index: int, neighbors: np.ndarray,
               rectangle: np.ndarray) -> np.ndarray:
    """Intersect the rectangle with the bisector half-planes around a site."""
    site = points[index]
    polygon = rectangle
    for j in neighbors:
        other = points[j]
        normal = other - site
        if not normal.any():
            continue
        offset = normal @ ((site + other) / 2)
        polygon = _clip_half_plane(polygon, normal, offset)
        if len(polygon) == 0:
            break
    return polygon


def _clip_half_plane(polygon: np.ndarray, normal: np.ndarray, offset: float) -> np.ndarray:
    """
    Keep the part of a convex polygon where ``dot(p, normal) <= offset``.

    Single Sutherland-Hodgman pass against one line.
    """
    distances = polygon @ normal - offset
    if np.all(distances <= 0):
        return polygon
    if np.all(distances > 0):
        return np.empty((0, 2), dtype=np.float64)

    clipped = []
    n = len(polygon)
    for k in range(n):
        current, following = polygon[k], polygon[(k + 1) % n]
        d_cur, d_next = distances[k], distances[(k + 1) % n]
        if d_cur <= 0:
            clipped.append(current)
        if (d_cur < 0 < d_next) or (d_next < 0 < d_cur):
            t = d_cur / (d_cur - d_next)
            clipped.append(current + t * (following - current))
    return np.array(clipped, dtype=np.float64).reshape(-1, 2)


def polygon_area(vertices: np.ndarray) -> float:
    """Unsigned area of a simple polygon (shoelace formula)."""
    if len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return 0.5 * abs(float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)))


def compute_polygon_centroid(vertices: np.ndarray) -> np.ndarray:
    """Compute the centroid of a polygon.

    Args:
        vertices: Array of [x, y] vertex coordinates

    Returns:
        [x, y] centroid coordinates
    """
    if len(vertices) < 3:
        return np.mean(vertices, axis=0)

    x = vertices[:, 0]
    y = vertices[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    area = cross.sum() / 2

    if abs(area) < 1e-10:
        return np.mean(vertices, axis=0)

    cx = ((x + x_next) * cross).sum() / (6.0 * area)
    cy = ((y + y_next) * cross).sum() / (6.0 * area)
    return np.array([cx, cy])
