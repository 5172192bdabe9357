"""Court geometry and the editable zone mesh."""

from dataclasses import dataclass
from typing import Optional

from .types import Mesh, MeshError, Point


@dataclass
class CourtGeometry:
    """Court layout constants in logical canvas units."""
    # Canvas
    CANVAS_WIDTH = 1000
    CANVAS_HEIGHT = 1400

    # Court rectangle (corner positions)
    LEFT = 60
    RIGHT = 940
    TOP = 220
    BOTTOM = 1340

    # Horizontal seam keeps this distance from the top and bottom edges
    HORIZONTAL_MARGIN = 220

    # Vertical seams keep this distance from the side lines and from each other
    SEAM_MARGIN = 180
    SEAM_MIN_GAP = 90

    # Derived junctions keep at least this horizontal gap
    JUNCTION_MIN_GAP = 40

    # Default seam positions
    DEFAULT_SEAM_A_X = 360
    DEFAULT_SEAM_B_X = 640
    DEFAULT_HORIZONTAL_Y = 760


# Control point keys
TOP_LEFT = "TL"
TOP_RIGHT = "TR"
BOTTOM_LEFT = "BL"
BOTTOM_RIGHT = "BR"
SEAM_A_TOP = "S1T"
SEAM_A_BOTTOM = "S1B"
SEAM_B_TOP = "S2T"
SEAM_B_BOTTOM = "S2B"
HORIZONTAL_LEFT = "HL"
HORIZONTAL_RIGHT = "HR"

CORNER_KEYS = (TOP_LEFT, TOP_RIGHT, BOTTOM_LEFT, BOTTOM_RIGHT)
EDITABLE_KEYS = (
    SEAM_A_TOP, SEAM_A_BOTTOM,
    SEAM_B_TOP, SEAM_B_BOTTOM,
    HORIZONTAL_LEFT, HORIZONTAL_RIGHT,
)
CONTROL_POINT_KEYS = CORNER_KEYS + EDITABLE_KEYS


def _clamp(value: float, low: float, high: float) -> float:
    # Lower bound wins when the range is empty
    return max(low, min(high, value))


def validate_mesh(mesh: Mesh) -> None:
    """
    Check that every named control point is present.

    Raises:
        MeshError: if any of the ten control points is missing
    """
    if mesh is None:
        raise MeshError("Mesh is missing")
    missing = [k for k in CONTROL_POINT_KEYS if k not in mesh.points]
    if missing:
        raise MeshError(f"Mesh is missing control points: {', '.join(missing)}")


def default_mesh() -> Mesh:
    """Canonical mesh with centered seams; already satisfies every invariant."""
    g = CourtGeometry
    return Mesh(points={
        TOP_LEFT: Point(g.LEFT, g.TOP),
        TOP_RIGHT: Point(g.RIGHT, g.TOP),
        BOTTOM_LEFT: Point(g.LEFT, g.BOTTOM),
        BOTTOM_RIGHT: Point(g.RIGHT, g.BOTTOM),
        SEAM_A_TOP: Point(g.DEFAULT_SEAM_A_X, g.TOP),
        SEAM_A_BOTTOM: Point(g.DEFAULT_SEAM_A_X, g.BOTTOM),
        SEAM_B_TOP: Point(g.DEFAULT_SEAM_B_X, g.TOP),
        SEAM_B_BOTTOM: Point(g.DEFAULT_SEAM_B_X, g.BOTTOM),
        HORIZONTAL_LEFT: Point(g.LEFT, g.DEFAULT_HORIZONTAL_Y),
        HORIZONTAL_RIGHT: Point(g.RIGHT, g.DEFAULT_HORIZONTAL_Y),
    })


def clamp_mesh(mesh: Mesh, dragged: Optional[str] = None) -> Mesh:
    """
    Return a copy of the mesh with every layout invariant restored.

    Idempotent. The steps run in a fixed order: canvas bounds, pinned
    axes, horizontal seam level, then vertical seam ordering (seam A is
    resolved before seam B).

    Args:
        mesh: Mesh to clamp; left untouched
        dragged: Key of the point being dragged. When it is the right
            horizontal endpoint its y sets the seam level, otherwise the
            left endpoint's y does.

    Returns:
        New clamped mesh
    """
    validate_mesh(mesh)
    g = CourtGeometry
    out = mesh.copy()
    P = out.points

    for p in P.values():
        p.x = _clamp(float(p.x), 0, g.CANVAS_WIDTH)
        p.y = _clamp(float(p.y), 0, g.CANVAS_HEIGHT)

    # Corners
    P[TOP_LEFT].x, P[TOP_LEFT].y = g.LEFT, g.TOP
    P[TOP_RIGHT].x, P[TOP_RIGHT].y = g.RIGHT, g.TOP
    P[BOTTOM_LEFT].x, P[BOTTOM_LEFT].y = g.LEFT, g.BOTTOM
    P[BOTTOM_RIGHT].x, P[BOTTOM_RIGHT].y = g.RIGHT, g.BOTTOM

    # Seam endpoints ride the top/bottom edges, horizontal endpoints the side lines
    P[SEAM_A_TOP].y = g.TOP
    P[SEAM_B_TOP].y = g.TOP
    P[SEAM_A_BOTTOM].y = g.BOTTOM
    P[SEAM_B_BOTTOM].y = g.BOTTOM
    P[HORIZONTAL_LEFT].x = g.LEFT
    P[HORIZONTAL_RIGHT].x = g.RIGHT

    # Level horizontal seam
    source = P[HORIZONTAL_RIGHT] if dragged == HORIZONTAL_RIGHT else P[HORIZONTAL_LEFT]
    level = _clamp(source.y, g.TOP + g.HORIZONTAL_MARGIN, g.BOTTOM - g.HORIZONTAL_MARGIN)
    P[HORIZONTAL_LEFT].y = level
    P[HORIZONTAL_RIGHT].y = level

    # Seam ordering, top edge then bottom edge
    low = g.LEFT + g.SEAM_MARGIN
    high = g.RIGHT - g.SEAM_MARGIN
    for a_key, b_key in ((SEAM_A_TOP, SEAM_B_TOP), (SEAM_A_BOTTOM, SEAM_B_BOTTOM)):
        a, b = P[a_key], P[b_key]
        a.x = _clamp(a.x, low, min(b.x, high) - g.SEAM_MIN_GAP)
        b.x = _clamp(b.x, a.x + g.SEAM_MIN_GAP, high)

    return out


def mesh_is_valid(mesh: Mesh) -> bool:
    """Check whether a mesh already satisfies every layout invariant."""
    try:
        return clamp_mesh(mesh) == mesh
    except MeshError:
        return False
