"""Closed-form polygon helpers: area, visible wall edges, hit testing, simplification."""

import logging
from typing import List, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import LineString, Polygon

from .models import WorldCoordinate

logger = logging.getLogger(__name__)

Edge = Tuple[WorldCoordinate, WorldCoordinate]


def _as_xy(points: Sequence[WorldCoordinate]) -> np.ndarray:
    return np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)


def shoelace_area(points: Sequence[WorldCoordinate]) -> float:
    """Unsigned polygon area: ½·|Σ(xᵢ·yᵢ₊₁ − xᵢ₊₁·yᵢ)|.

    The ring may be open or closed; a repeated closing vertex adds a
    zero-length edge and does not change the result.
    """
    if len(points) < 3:
        return 0.0
    xy = _as_xy(points)
    x, y = xy[:, 0], xy[:, 1]
    x_next, y_next = np.roll(x, -1), np.roll(y, -1)
    return float(abs(np.sum(x * y_next - x_next * y)) / 2)


def vertex_centroid(points: Sequence[Tuple[float, float]]) -> Tuple[float, float]:
    """Plain average of the ring's vertices."""
    xy = np.asarray(points, dtype=float).reshape(-1, 2)
    if xy.size == 0:
        return 0.0, 0.0
    cx, cy = xy.mean(axis=0)
    return float(cx), float(cy)


def visible_wall_edges(points: Sequence[WorldCoordinate]) -> List[Edge]:
    """Edges whose direction has a positive x or y component.

    These are the south- and east-facing sides that an isometric viewer
    sees; back walls are never generated.  Zero-length edges (closing or
    duplicate vertices) are skipped since neither component is positive.
    """
    edges = []
    n = len(points)
    for i in range(n):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        if p2.x - p1.x > 0 or p2.y - p1.y > 0:
            edges.append((p1, p2))
    return edges


def wall_quad(edge: Edge, extrusion: float) -> List[Tuple[float, float]]:
    """Quad for one wall: the edge plus its copy shifted down by ``extrusion``."""
    p1, p2 = edge
    return [(p1.x, p1.y), (p2.x, p2.y),
            (p2.x, p2.y + extrusion), (p1.x, p1.y + extrusion)]


def hit_polygon(points: Sequence[WorldCoordinate]) -> Polygon:
    """Prepared shapely polygon used for point containment tests."""
    coords = [(p.x, p.y) for p in points]
    if len(coords) < 3:
        return Polygon()
    poly = Polygon(coords)
    shapely.prepare(poly)
    return poly


def contains_point(polygon: Polygon, x: float, y: float) -> bool:
    """True when (x, y) lies strictly inside ``polygon``."""
    if polygon.is_empty:
        return False
    return bool(shapely.contains_xy(polygon, x, y))


def simplify_ring(ring: Sequence[Sequence[float]], tolerance: float) -> List[List[float]]:
    """Douglas–Peucker simplification of a ring treated as an open polyline.

    Endpoints are always kept, so a closed ring stays closed.  Returns the
    input unchanged if simplifying would leave fewer than three points.
    """
    if len(ring) < 3 or tolerance <= 0:
        return [list(pt) for pt in ring]

    simplified = LineString([tuple(pt[:2]) for pt in ring]).simplify(
        tolerance, preserve_topology=False)
    coords = [list(c) for c in simplified.coords]

    closed = list(ring[0][:2]) == list(ring[-1][:2])
    distinct = len(coords) - 1 if closed else len(coords)
    if distinct < 3:
        logger.debug(f"Simplification would collapse a {len(ring)}-point ring; kept as is")
        return [list(pt) for pt in ring]
    return coords
