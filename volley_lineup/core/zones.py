"""
Zone geometry derived from the court mesh.

Zones carry no stored shape: every polygon is rebuilt from the current
mesh on each query so edits to the mesh show up immediately.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .court import (
    CourtGeometry, validate_mesh,
    TOP_LEFT, TOP_RIGHT, BOTTOM_LEFT, BOTTOM_RIGHT,
    SEAM_A_TOP, SEAM_A_BOTTOM, SEAM_B_TOP, SEAM_B_BOTTOM,
    HORIZONTAL_LEFT, HORIZONTAL_RIGHT,
)
from .types import Mesh, Point, ZoneId

logger = logging.getLogger(__name__)

PARALLEL_EPSILON = 1e-9
RAY_EPSILON = 1e-9

JUNCTION_A = "I1"
JUNCTION_B = "I2"

# Vertex keys per zone, in polygon order
ZONE_TOPOLOGY: Dict[ZoneId, Tuple[str, str, str, str]] = {
    ZoneId.FRONT_LEFT: (TOP_LEFT, SEAM_A_TOP, JUNCTION_A, HORIZONTAL_LEFT),
    ZoneId.FRONT_MIDDLE: (SEAM_A_TOP, SEAM_B_TOP, JUNCTION_B, JUNCTION_A),
    ZoneId.FRONT_RIGHT: (SEAM_B_TOP, TOP_RIGHT, HORIZONTAL_RIGHT, JUNCTION_B),
    ZoneId.BACK_RIGHT: (JUNCTION_B, HORIZONTAL_RIGHT, BOTTOM_RIGHT, SEAM_B_BOTTOM),
    ZoneId.BACK_MIDDLE: (JUNCTION_A, JUNCTION_B, SEAM_B_BOTTOM, SEAM_A_BOTTOM),
    ZoneId.BACK_LEFT: (HORIZONTAL_LEFT, JUNCTION_A, SEAM_A_BOTTOM, BOTTOM_LEFT),
}


def line_intersection(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
    """
    Intersect the infinite line through a, b with the one through c, d.

    Returns:
        Intersection point, or None when the lines are (nearly) parallel
    """
    den = (a.x - b.x) * (c.y - d.y) - (a.y - b.y) * (c.x - d.x)
    if abs(den) < PARALLEL_EPSILON:
        return None

    ab = a.x * b.y - a.y * b.x
    cd = c.x * d.y - c.y * d.x
    px = (ab * (c.x - d.x) - (a.x - b.x) * cd) / den
    py = (ab * (c.y - d.y) - (a.y - b.y) * cd) / den
    return Point(px, py)


def derive_junctions(mesh: Mesh) -> Tuple[Point, Point]:
    """
    Locate where each vertical seam crosses the horizontal seam.

    Degenerate (parallel) configurations fall back to the midpoint of the
    seam's top and bottom x at the horizontal seam's y.

    Returns:
        (junction under seam A, junction under seam B)
    """
    validate_mesh(mesh)
    P = mesh.points
    h1, h2 = P[HORIZONTAL_LEFT], P[HORIZONTAL_RIGHT]

    junctions = []
    for top_key, bottom_key in ((SEAM_A_TOP, SEAM_A_BOTTOM), (SEAM_B_TOP, SEAM_B_BOTTOM)):
        top, bottom = P[top_key], P[bottom_key]
        junction = line_intersection(top, bottom, h1, h2)
        if junction is None:
            logger.debug(f"Seam {top_key}-{bottom_key} parallel to horizontal seam, using midpoint")
            junction = Point((top.x + bottom.x) / 2, h1.y)
        junctions.append(junction)

    j1, j2 = junctions
    j1.x = min(max(j1.x, CourtGeometry.LEFT), CourtGeometry.RIGHT)
    j2.x = min(max(j2.x, CourtGeometry.LEFT), CourtGeometry.RIGHT)

    # Keep the middle zones from folding over
    if j2.x < j1.x + CourtGeometry.JUNCTION_MIN_GAP:
        j2.x = j1.x + CourtGeometry.JUNCTION_MIN_GAP

    return j1, j2


def _vertex_table(mesh: Mesh) -> Dict[str, Point]:
    j1, j2 = derive_junctions(mesh)
    table = {k: p.copy() for k, p in mesh.points.items()}
    table[JUNCTION_A] = j1
    table[JUNCTION_B] = j2
    return table


def zone_polygon(mesh: Mesh, zone: Union[ZoneId, str, int]) -> List[Point]:
    """
    Build the quadrilateral for one zone.

    Raises:
        UnknownZoneError: for an unrecognized zone identifier
        MeshError: when the mesh lacks control points
    """
    zone = ZoneId.parse(zone)
    table = _vertex_table(mesh)
    return [table[k].copy() for k in ZONE_TOPOLOGY[zone]]


def zone_layout(mesh: Mesh) -> Dict[ZoneId, List[Point]]:
    """Build every zone polygon from a single junction derivation."""
    table = _vertex_table(mesh)
    return {
        zone: [table[k].copy() for k in keys]
        for zone, keys in ZONE_TOPOLOGY.items()
    }


def centroid(polygon: Sequence[Point]) -> Point:
    """Vertex mean; used for label and token placement."""
    if not polygon:
        raise ValueError("Cannot take the centroid of an empty polygon")
    mean = np.mean([p.to_tuple() for p in polygon], axis=0)
    return Point(float(mean[0]), float(mean[1]))


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Ray casting parity test."""
    inside = False
    n = len(polygon)
    for i in range(n):
        x1, y1 = polygon[i].x, polygon[i].y
        x2, y2 = polygon[i - 1].x, polygon[i - 1].y
        if (y1 > point.y) != (y2 > point.y):
            xin = (x2 - x1) * (point.y - y1) / (y2 - y1 + RAY_EPSILON) + x1
            if point.x < xin:
                inside = not inside
    return inside


def resolve_zone_at(mesh: Mesh, point: Point) -> Optional[ZoneId]:
    """
    Find the zone containing a point.

    Zones are tested in canonical order and the first hit wins.

    Returns:
        Zone identifier, or None when the point is outside every zone
    """
    for zone, polygon in zone_layout(mesh).items():
        if point_in_polygon(point, polygon):
            return zone
    return None
