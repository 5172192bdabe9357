"""Core modules for volleyball lineup management."""

from .types import (
    LineupError, MeshError, UnknownZoneError, NotFoundError,
    ZoneId, BenchSide, RotateDirection, LocationKind,
    Point, Mesh, Player, Rotation, Team, LineupState, Location,
    SetSlot, QueueInsert, Rotate, MutationRequest, LineupConfig,
    FRONT_ROW, BACK_ROW, new_id
)

from .court import CourtGeometry, default_mesh, clamp_mesh, validate_mesh, mesh_is_valid
from .zones import (
    ZONE_TOPOLOGY, derive_junctions, line_intersection, zone_polygon,
    zone_layout, centroid, point_in_polygon, resolve_zone_at
)
from .rotation import rotate, rotate_clockwise, rotate_counter_clockwise
from .membership import normalize
from .placement import locate_player, drop_player, apply_request
from .team import (
    make_new_team, make_new_rotation, repair_rotation, find_player, find_rotation,
    add_player, rename_player, delete_player, add_rotation, clone_rotation,
    delete_rotation, rename_rotation, rename_team, reset_layout
)
from .labels import describe_location, token_label, zone_caption, placed_count
from .io_utils import LineupIO, LineupStore
from .session import LineupContext, DragSession, DragKind

__all__ = [
    # Types
    'LineupError', 'MeshError', 'UnknownZoneError', 'NotFoundError',
    'ZoneId', 'BenchSide', 'RotateDirection', 'LocationKind',
    'Point', 'Mesh', 'Player', 'Rotation', 'Team', 'LineupState', 'Location',
    'SetSlot', 'QueueInsert', 'Rotate', 'MutationRequest', 'LineupConfig',
    'FRONT_ROW', 'BACK_ROW', 'new_id',

    # Court geometry
    'CourtGeometry', 'default_mesh', 'clamp_mesh', 'validate_mesh', 'mesh_is_valid',
    'ZONE_TOPOLOGY', 'derive_junctions', 'line_intersection', 'zone_polygon',
    'zone_layout', 'centroid', 'point_in_polygon', 'resolve_zone_at',

    # Lineup operations
    'rotate', 'rotate_clockwise', 'rotate_counter_clockwise',
    'normalize',
    'locate_player', 'drop_player', 'apply_request',
    'make_new_team', 'make_new_rotation', 'repair_rotation', 'find_player', 'find_rotation',
    'add_player', 'rename_player', 'delete_player', 'add_rotation', 'clone_rotation',
    'delete_rotation', 'rename_rotation', 'rename_team', 'reset_layout',
    'describe_location', 'token_label', 'zone_caption', 'placed_count',

    # Persistence and state
    'LineupIO', 'LineupStore',
    'LineupContext', 'DragSession', 'DragKind'
]
