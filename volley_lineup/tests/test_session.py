"""Tests for the lineup context and drag sessions."""

import json
import tempfile
from pathlib import Path

import pytest

from volley_lineup.core import (
    BenchSide, DragKind, LineupConfig, LineupContext, LineupIO, LineupStore, NotFoundError,
    Point, SetSlot, ZoneId, default_mesh,
)


class TestSelection:
    """Test team and rotation selection."""

    def setup_method(self):
        """Set up test fixtures."""
        self.context = LineupContext(config=LineupConfig(default_team_name="Home", roster_size=8))

    def test_fresh_context(self):
        """Test that an empty context gets a default team."""
        team = self.context.current_team

        assert team.name == "Home"
        assert len(team.players) == 8
        assert self.context.current_rotation is team.rotations[0]
        assert not self.context.state.edit_layout

    def test_new_team_first_and_selected(self):
        """Test that a new team is listed first and selected."""
        team = self.context.new_team("Away")

        assert self.context.state.teams[0] is team
        assert self.context.current_team is team
        assert self.context.current_rotation is team.rotations[0]

    def test_delete_team(self):
        """Test that deleting the only team leaves a fresh one."""
        old = self.context.current_team

        self.context.delete_team(old.id)

        assert len(self.context.state.teams) == 1
        assert self.context.current_team.id != old.id

        with pytest.raises(NotFoundError):
            self.context.delete_team("missing")

    def test_select_team_picks_first_rotation(self):
        """Test that selecting a team selects its first rotation."""
        first = self.context.current_team
        self.context.new_rotation()
        self.context.new_team("Away")

        self.context.select_team(first.id)

        assert self.context.current_team is first
        assert self.context.current_rotation is first.rotations[0]

    def test_select_rotation(self):
        """Test rotation selection and unknown ids."""
        rotation = self.context.new_rotation()
        self.context.select_rotation(self.context.current_team.rotations[0].id)
        self.context.select_rotation(rotation.id)

        assert self.context.current_rotation is rotation
        with pytest.raises(NotFoundError):
            self.context.select_rotation("missing")

    def test_ensure_valid_selection_repairs(self):
        """Test that a dangling selection is fixed."""
        self.context.state.current_team_id = "gone"
        self.context.state.current_rotation_id = "gone"

        self.context.ensure_valid_selection()

        assert self.context.current_team is self.context.state.teams[0]
        assert self.context.current_rotation is self.context.current_team.rotations[0]

    def test_loaded_teams_all_repaired(self):
        """Test that rotations of teams other than the selected one are repaired on load."""
        home = self.context.current_team
        data = LineupIO().state_to_dict(self.context.state)
        players = [{"id": f"b{i}", "number": i, "name": str(i)} for i in range(1, 7)]
        data["teams"].append({"id": "away", "name": "Away", "players": players,
                              "rotations": [{"id": "rb", "name": "Partial"}]})
        data["teams"].append({"id": "empty", "name": "Empty", "players": players[:2], "rotations": []})

        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "state.json"
            with open(path, "w") as f:
                json.dump(data, f)

            context = LineupContext.from_store(LineupStore(path))

            assert context.current_team.id == home.id
            _, rotation = context.resolve("away", "rb")
            assert rotation.positions[ZoneId.FRONT_LEFT] == "b1"
            assert rotation.left_bench == [] and rotation.right_bench == []
            assert rotation.mesh == default_mesh()

            rotated = context.rotate("cw", team_id="away", rotation_id="rb")
            assert rotated.positions[ZoneId.FRONT_MIDDLE] == "b1"

            _, seeded = context.resolve("empty")
            assert seeded.name == "Rotation 1"

    def test_delete_selected_rotation(self):
        """Test that deleting the selected rotation selects the first."""
        rotation = self.context.new_rotation()

        self.context.delete_rotation()

        assert rotation not in self.context.current_team.rotations
        assert self.context.current_rotation is self.context.current_team.rotations[0]

    def test_clone_selects_copy(self):
        """Test that a clone becomes the selected rotation."""
        cloned = self.context.clone_rotation()

        assert self.context.current_rotation is cloned
        assert self.context.current_team.rotations.index(cloned) == 1

    def test_unknown_player(self):
        """Test that unknown players are reported."""
        with pytest.raises(NotFoundError):
            self.context.rename_player("missing", "X")
        with pytest.raises(NotFoundError):
            self.context.delete_player("missing")
        with pytest.raises(NotFoundError):
            self.context.drop("missing", bench=BenchSide.LEFT)


class TestDragSessions:
    """Test player and mesh drags."""

    def setup_method(self):
        """Set up test fixtures."""
        self.context = LineupContext()
        self.rotation = self.context.current_rotation
        self.p = self.context.current_team.roster_ids

    def test_player_drag_swap(self):
        """Test a completed player drag onto an occupied zone."""
        session = self.context.begin_player_drag(self.p[0])
        assert session.kind == DragKind.PLAYER

        assert self.context.move_drag(Point(790, 490)) == ZoneId.FRONT_RIGHT
        assert self.context.end_drag(point=Point(790, 490))

        assert self.rotation.positions[ZoneId.FRONT_RIGHT] == self.p[0]
        assert self.rotation.positions[ZoneId.FRONT_LEFT] == self.p[2]
        assert self.context.drag is None

    def test_player_drag_to_bench(self):
        """Test a completed player drag onto a bench."""
        self.context.begin_player_drag(self.p[1])

        assert self.context.end_drag(bench=BenchSide.RIGHT)
        assert self.rotation.right_bench[0] == self.p[1]

    def test_player_drag_outside(self):
        """Test that a drop outside every target changes nothing."""
        positions = dict(self.rotation.positions)
        self.context.begin_player_drag(self.p[0])

        assert self.context.move_drag(Point(5, 5)) is None
        assert not self.context.end_drag(point=Point(5, 5))
        assert self.rotation.positions == positions

    def test_one_session_at_a_time(self):
        """Test that a second drag is refused while one is active."""
        assert self.context.begin_player_drag(self.p[0]) is not None
        assert self.context.begin_player_drag(self.p[1]) is None

        self.context.cancel_drag()
        assert self.context.drag is None
        assert self.context.begin_player_drag(self.p[1]) is not None

    def test_player_drag_refused_in_edit_layout(self):
        """Test that layout editing blocks player drags."""
        self.context.set_edit_layout(True)

        assert self.context.begin_player_drag(self.p[0]) is None
        assert self.context.begin_player_drag("missing") is None

    def test_mesh_drag_requires_edit_layout(self):
        """Test mesh drag preconditions."""
        assert self.context.begin_mesh_drag("S1T") is None

        self.context.set_edit_layout(True)
        assert self.context.begin_mesh_drag("TL") is None
        assert self.context.begin_mesh_drag("S1T").kind == DragKind.MESH_POINT

    def test_mesh_drag_clamps(self):
        """Test that moves are clamped while dragging."""
        self.context.set_edit_layout(True)
        self.context.begin_mesh_drag("S1T")

        self.context.move_drag(Point(900, 100))

        assert self.context.drag.mesh.points["S1T"] == Point(550, 220)
        assert self.context.current_rotation.mesh == default_mesh()

        assert self.context.end_drag()
        assert self.context.current_rotation.mesh.points["S1T"] == Point(550, 220)

    def test_mesh_drag_horizontal_right(self):
        """Test dragging the right horizontal endpoint levels the seam."""
        self.context.set_edit_layout(True)
        self.context.begin_mesh_drag("HR")

        self.context.end_drag(point=Point(500, 900))

        mesh = self.context.current_rotation.mesh
        assert mesh.points["HL"].y == 900
        assert mesh.points["HR"] == Point(940, 900)

    def test_mesh_drag_cancel_restores(self):
        """Test that cancelling restores the mesh the drag started from."""
        self.context.set_edit_layout(True)
        self.context.begin_mesh_drag("HL")
        self.context.move_drag(Point(60, 1000))
        assert self.context.drag.mesh.points["HL"].y == 1000

        self.context.cancel_drag()

        assert self.context.current_rotation.mesh == default_mesh()

    def test_edit_layout_toggle_cancels_drag(self):
        """Test that switching modes abandons an active drag."""
        self.context.begin_player_drag(self.p[0])

        self.context.set_edit_layout(True)

        assert self.context.drag is None

    def test_move_mesh_point_rejects_corners(self):
        """Test that corners cannot be moved."""
        with pytest.raises(NotFoundError):
            self.context.move_mesh_point("TL", Point(0, 0))


class TestPersistence:
    """Test that committed mutations are saved."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name) / "state.json"
        self.context = LineupContext.from_store(LineupStore(self.path))

    def teardown_method(self):
        """Clean up temporary files."""
        self.temp_dir.cleanup()

    def test_rotate_is_saved(self):
        """Test that a rotation survives a reload."""
        self.context.rotate("cw")

        reloaded = LineupContext.from_store(LineupStore(self.path))

        assert self.path.exists()
        assert reloaded.current_rotation.positions == self.context.current_rotation.positions
        assert reloaded.current_rotation.left_bench == self.context.current_rotation.left_bench

    def test_request_and_mesh_saved(self):
        """Test that requests and layout edits survive a reload."""
        pid = self.context.current_team.roster_ids[7]
        self.context.apply(SetSlot(ZoneId.BACK_MIDDLE, pid))
        self.context.set_edit_layout(True)
        self.context.begin_mesh_drag("S2B")
        self.context.end_drag(point=Point(700, 1340))

        reloaded = LineupContext.from_store(LineupStore(self.path))

        assert reloaded.current_rotation.positions[ZoneId.BACK_MIDDLE] == pid
        assert reloaded.current_rotation.mesh.points["S2B"] == Point(700, 1340)
        assert reloaded.state.edit_layout

    def test_cancelled_drag_not_saved(self):
        """Test that nothing is written for a cancelled drag."""
        self.context.begin_player_drag(self.context.current_team.roster_ids[0])
        self.context.cancel_drag()

        assert not self.path.exists()

    def test_cancelled_mesh_drag_not_saved_by_other_commits(self):
        """Test that a mesh preview never reaches the store when the drag is cancelled."""
        self.context.set_edit_layout(True)
        self.context.begin_mesh_drag("S1T")
        self.context.move_drag(Point(500, 220))

        self.context.rotate("cw")
        self.context.cancel_drag()

        reloaded = LineupContext.from_store(LineupStore(self.path))
        assert self.context.current_rotation.mesh.points["S1T"] == Point(360, 220)
        assert reloaded.current_rotation.mesh.points["S1T"] == Point(360, 220)
        assert reloaded.current_rotation.positions == self.context.current_rotation.positions
