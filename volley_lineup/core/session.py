"""
Lineup context: selection, drag sessions and committed mutations.

All application state lives in one LineupContext. It owns the current
team/rotation selection and at most one drag session, and persists
through its store after every committed mutation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from . import team as team_ops
from .court import EDITABLE_KEYS, clamp_mesh
from .io_utils import LineupStore
from .membership import normalize
from .placement import apply_request, drop_player, locate_player
from .rotation import rotate
from .types import (
    BenchSide, LineupConfig, LineupState, Location, Mesh, MutationRequest,
    NotFoundError, Player, Point, RotateDirection, Rotation, Team, ZoneId,
)
from .zones import resolve_zone_at

logger = logging.getLogger(__name__)


class DragKind(Enum):
    """Kinds of drag session."""
    PLAYER = "player"
    MESH_POINT = "mesh_point"


@dataclass
class DragSession:
    """An in-progress drag, begun on the current rotation."""
    kind: DragKind
    team_id: str
    rotation_id: str
    player_id: Optional[str] = None
    source: Optional[Location] = None
    point_key: Optional[str] = None
    mesh: Optional[Mesh] = None
    hover: Optional[ZoneId] = None


class LineupContext:
    """Application state plus the single active drag session."""

    def __init__(self, state: Optional[LineupState] = None,
                 store: Optional[LineupStore] = None,
                 config: Optional[LineupConfig] = None):
        """Initialize context; an empty state is seeded with a default team."""
        self.config = config or LineupConfig()
        self.store = store
        self.state = state or LineupState()
        self.drag: Optional[DragSession] = None
        self.ensure_valid_selection()

    @classmethod
    def from_store(cls, store: LineupStore, config: Optional[LineupConfig] = None) -> 'LineupContext':
        """Load state from a store, falling back to a fresh team."""
        state = store.load()
        if state is None:
            logger.info(f"No saved lineup at {store.path}, starting fresh")
        return cls(state=state, store=store, config=config)

    def commit(self, action: str):
        """Persist after a committed mutation."""
        if self.store is not None:
            self.store.save(self.state)
        logger.debug(f"Committed: {action}")

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def _make_team(self, name: Optional[str] = None) -> Team:
        return team_ops.make_new_team(name or self.config.default_team_name, self.config.roster_size)

    def ensure_valid_selection(self):
        """Make sure a team and rotation are selected and every rotation is consistent."""
        state = self.state
        if not state.teams:
            state.teams = [self._make_team()]
        if self.team(state.current_team_id, required=False) is None:
            state.current_team_id = state.teams[0].id

        for team in state.teams:
            if not team.rotations:
                team.rotations = [team_ops.make_new_rotation("Rotation 1", team.players)]
            for rotation in team.rotations:
                team_ops.repair_rotation(team, rotation)

        if team_ops.find_rotation(self.current_team, state.current_rotation_id) is None:
            state.current_rotation_id = self.current_team.rotations[0].id

    @property
    def current_team(self) -> Team:
        return self.team(self.state.current_team_id)

    @property
    def current_rotation(self) -> Rotation:
        return self.rotation(self.current_team, self.state.current_rotation_id)

    def team(self, team_id: Optional[str], required: bool = True) -> Optional[Team]:
        """Look up a team by id."""
        found = next((t for t in self.state.teams if t.id == team_id), None)
        if found is None and required:
            raise NotFoundError(f"Team not found: {team_id}")
        return found

    def rotation(self, team: Team, rotation_id: Optional[str]) -> Rotation:
        """Look up a rotation of a team by id."""
        found = team_ops.find_rotation(team, rotation_id)
        if found is None:
            raise NotFoundError(f"Rotation not found: {rotation_id}")
        return found

    def resolve(self, team_id: Optional[str] = None,
                rotation_id: Optional[str] = None) -> Tuple[Team, Rotation]:
        """
        Look up a team and one of its rotations.

        Omitted ids fall back to the selection; for a team other than the
        selected one the rotation defaults to its first.

        Raises:
            NotFoundError: for an unknown team or rotation id
        """
        team = self.team(team_id) if team_id else self.current_team
        if rotation_id:
            return team, self.rotation(team, rotation_id)
        if team is self.current_team:
            return team, self.current_rotation
        return team, team.rotations[0]

    def select_team(self, team_id: str):
        """Select a team and its first rotation."""
        team = self.team(team_id)
        self.state.current_team_id = team.id
        self.state.current_rotation_id = team.rotations[0].id if team.rotations else None
        self.ensure_valid_selection()
        self.commit("select team")

    def select_rotation(self, rotation_id: str):
        rotation = self.rotation(self.current_team, rotation_id)
        self.state.current_rotation_id = rotation.id
        self.commit("select rotation")

    def set_edit_layout(self, enabled: bool):
        """Toggle layout editing; any active drag is cancelled."""
        if self.drag is not None:
            self.cancel_drag()
        self.state.edit_layout = bool(enabled)
        self.commit("edit layout")

    # ------------------------------------------------------------------
    # Teams and roster
    # ------------------------------------------------------------------

    def new_team(self, name: Optional[str] = None) -> Team:
        """Create a team, put it first and select it."""
        team = self._make_team((name or "").strip() or "New Team")
        self.state.teams.insert(0, team)
        self.state.current_team_id = team.id
        self.state.current_rotation_id = team.rotations[0].id
        self.commit("new team")
        return team

    def delete_team(self, team_id: str):
        """Delete a team; a fresh one is created if none remain."""
        self.team(team_id)
        self.state.teams = [t for t in self.state.teams if t.id != team_id]
        if not self.state.teams:
            self.state.teams = [self._make_team()]
        self.state.current_team_id = self.state.teams[0].id
        self.state.current_rotation_id = self.state.teams[0].rotations[0].id
        self.ensure_valid_selection()
        self.commit("delete team")

    def rename_team(self, name: str, team_id: Optional[str] = None):
        team = self.team(team_id) if team_id else self.current_team
        team_ops.rename_team(team, name)
        self.commit("rename team")

    def add_player(self, name: Optional[str] = None, team_id: Optional[str] = None) -> Player:
        team = self.team(team_id) if team_id else self.current_team
        player = team_ops.add_player(team, name)
        self.commit("add player")
        return player

    def rename_player(self, player_id: str, name: str, team_id: Optional[str] = None):
        team = self.team(team_id) if team_id else self.current_team
        if not team_ops.rename_player(team, player_id, name):
            raise NotFoundError(f"Player not found: {player_id}")
        self.commit("rename player")

    def delete_player(self, player_id: str, team_id: Optional[str] = None):
        team = self.team(team_id) if team_id else self.current_team
        if not team_ops.delete_player(team, player_id):
            raise NotFoundError(f"Player not found: {player_id}")
        self.commit("delete player")

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------

    def new_rotation(self, team_id: Optional[str] = None) -> Rotation:
        team = self.team(team_id) if team_id else self.current_team
        rotation = team_ops.add_rotation(team)
        if team is self.current_team:
            self.state.current_rotation_id = rotation.id
        self.commit("new rotation")
        return rotation

    def clone_rotation(self, team_id: Optional[str] = None,
                       rotation_id: Optional[str] = None) -> Rotation:
        team, source = self.resolve(team_id, rotation_id)
        cloned = team_ops.clone_rotation(team, source.id)
        if team is self.current_team:
            self.state.current_rotation_id = cloned.id
        self.commit("clone rotation")
        return cloned

    def delete_rotation(self, team_id: Optional[str] = None, rotation_id: Optional[str] = None):
        team, rotation = self.resolve(team_id, rotation_id)
        team_ops.delete_rotation(team, rotation.id)
        if team is self.current_team:
            self.state.current_rotation_id = team.rotations[0].id
        self.commit("delete rotation")

    def rename_rotation(self, name: str, team_id: Optional[str] = None,
                        rotation_id: Optional[str] = None):
        team, rotation = self.resolve(team_id, rotation_id)
        team_ops.rename_rotation(team, rotation.id, name)
        self.commit("rename rotation")

    def reset_layout(self, team_id: Optional[str] = None, rotation_id: Optional[str] = None) -> Rotation:
        _, rotation = self.resolve(team_id, rotation_id)
        team_ops.reset_layout(rotation)
        self.commit("reset layout")
        return rotation

    # ------------------------------------------------------------------
    # Lineup mutations
    # ------------------------------------------------------------------

    def rotate(self, direction: Union[RotateDirection, str], team_id: Optional[str] = None,
               rotation_id: Optional[str] = None) -> Rotation:
        team, rotation = self.resolve(team_id, rotation_id)
        rotate(rotation, direction)
        normalize(team.roster_ids, rotation)
        self.commit(f"rotate {RotateDirection(direction).value}")
        return rotation

    def apply(self, request: MutationRequest, team_id: Optional[str] = None,
              rotation_id: Optional[str] = None) -> Rotation:
        team, rotation = self.resolve(team_id, rotation_id)
        apply_request(team.roster_ids, rotation, request)
        self.commit(type(request).__name__)
        return rotation

    def drop(self, player_id: str, bench: Optional[BenchSide] = None,
             point: Optional[Point] = None, team_id: Optional[str] = None,
             rotation_id: Optional[str] = None) -> bool:
        """Move a player in one step, as a completed drag would."""
        team, rotation = self.resolve(team_id, rotation_id)
        source = locate_player(rotation, player_id)
        if source is None:
            raise NotFoundError(f"Player not placed in rotation: {player_id}")
        committed = drop_player(team.roster_ids, rotation, player_id, source, bench=bench, point=point)
        if committed:
            self.commit("drop")
        return committed

    def move_mesh_point(self, key: str, point: Point, team_id: Optional[str] = None,
                        rotation_id: Optional[str] = None) -> Rotation:
        """Move one editable control point and re-clamp the mesh."""
        if key not in EDITABLE_KEYS:
            raise NotFoundError(f"Not an editable control point: {key}")
        _, rotation = self.resolve(team_id, rotation_id)
        rotation.mesh = self._moved_mesh(rotation.mesh, key, point)
        self.commit("move mesh point")
        return rotation

    @staticmethod
    def _moved_mesh(mesh: Mesh, key: str, point: Point) -> Mesh:
        moved = mesh.copy()
        moved.points[key] = Point(point.x, point.y)
        return clamp_mesh(moved, dragged=key)

    # ------------------------------------------------------------------
    # Drag sessions
    # ------------------------------------------------------------------

    def begin_player_drag(self, player_id: str) -> Optional[DragSession]:
        """
        Start dragging a player of the current rotation.

        Returns:
            The session, or None when another session is active, layout
            editing is on, or the player is not placed in the rotation
        """
        if self.drag is not None or self.state.edit_layout:
            return None
        rotation = self.current_rotation
        source = locate_player(rotation, player_id)
        if source is None:
            return None

        self.drag = DragSession(
            kind=DragKind.PLAYER,
            team_id=self.current_team.id,
            rotation_id=rotation.id,
            player_id=player_id,
            source=source,
        )
        logger.debug(f"Player drag started: {player_id}")
        return self.drag

    def begin_mesh_drag(self, key: str) -> Optional[DragSession]:
        """Start dragging an editable control point of the current rotation."""
        if self.drag is not None or not self.state.edit_layout or key not in EDITABLE_KEYS:
            return None
        rotation = self.current_rotation
        self.drag = DragSession(
            kind=DragKind.MESH_POINT,
            team_id=self.current_team.id,
            rotation_id=rotation.id,
            point_key=key,
            mesh=rotation.mesh.copy(),
        )
        logger.debug(f"Mesh drag started: {key}")
        return self.drag

    def _drag_target(self) -> Tuple[Team, Rotation]:
        team = self.team(self.drag.team_id)
        return team, self.rotation(team, self.drag.rotation_id)

    def move_drag(self, point: Point) -> Optional[ZoneId]:
        """
        Update the active drag with a new pointer position.

        A mesh drag only updates its preview in `drag.mesh`; the rotation
        keeps its mesh until the drag ends.

        Returns:
            For player drags, the zone under the pointer (drop hover)
        """
        if self.drag is None:
            return None
        if self.drag.kind == DragKind.MESH_POINT:
            self.drag.mesh = self._moved_mesh(self.drag.mesh, self.drag.point_key, point)
            return None

        _, rotation = self._drag_target()
        self.drag.hover = resolve_zone_at(rotation.mesh, point)
        return self.drag.hover

    def end_drag(self, point: Optional[Point] = None, bench: Optional[BenchSide] = None) -> bool:
        """
        Finish the active drag.

        Returns:
            True if a mutation was committed
        """
        session = self.drag
        if session is None:
            return False
        self.drag = None
        team = self.team(session.team_id)
        rotation = self.rotation(team, session.rotation_id)

        if session.kind == DragKind.MESH_POINT:
            mesh = session.mesh
            if point is not None:
                mesh = self._moved_mesh(mesh, session.point_key, point)
            rotation.mesh = clamp_mesh(mesh)
            self.commit("mesh edit")
            return True

        source = locate_player(rotation, session.player_id)
        if source is None:
            logger.warning(f"Dragged player no longer placed: {session.player_id}")
            return False
        committed = drop_player(team.roster_ids, rotation, session.player_id, source,
                                bench=bench, point=point)
        if committed:
            self.commit("drop")
        return committed

    def cancel_drag(self):
        """Abandon the active drag; the rotation is left untouched."""
        session = self.drag
        if session is None:
            return
        self.drag = None
        logger.debug(f"Drag cancelled: {session.kind.value}")
