"""Tests for team, roster and rotation management."""

from volley_lineup.core import (
    Mesh, Point, Rotation, ZoneId, add_player, add_rotation, clone_rotation,
    default_mesh, delete_player, delete_rotation, make_new_team, mesh_is_valid,
    rename_player, rename_rotation, rename_team, repair_rotation, reset_layout,
)


class TestTeamManagement:
    """Test team and roster lifecycle."""

    def setup_method(self):
        """Set up test fixtures."""
        self.team = make_new_team("Team A", 12)

    def test_new_team(self):
        """Test the seeded team."""
        assert self.team.name == "Team A"
        assert [p.number for p in self.team.players] == list(range(1, 13))
        assert [p.name for p in self.team.players] == [str(n) for n in range(1, 13)]
        assert len(self.team.rotations) == 1

        rotation = self.team.rotations[0]
        assert rotation.name == "Rotation 1"
        assert mesh_is_valid(rotation.mesh)
        assert len(rotation.left_bench) == 3
        assert len(rotation.right_bench) == 3

    def test_small_roster(self):
        """Test seeding with fewer players than zones."""
        team = make_new_team("Small", 4)
        rotation = team.rotations[0]

        assert rotation.positions[ZoneId.BACK_RIGHT] == team.players[3].id
        assert rotation.positions[ZoneId.BACK_MIDDLE] is None
        assert rotation.positions[ZoneId.BACK_LEFT] is None

    def test_add_player(self):
        """Test that a new player tops the right bench of every rotation."""
        add_rotation(self.team)

        player = add_player(self.team, "  Sam  ")

        assert player.number == 13
        assert player.name == "Sam"
        for rotation in self.team.rotations:
            assert rotation.right_bench[0] == player.id

    def test_add_player_default_name(self):
        """Test numbering after a deletion and the default name."""
        delete_player(self.team, self.team.players[4].id)

        player = add_player(self.team, "   ")

        assert player.number == 13
        assert player.name == "13"

    def test_rename_player(self):
        """Test renaming, blank names and unknown players."""
        pid = self.team.players[0].id

        assert rename_player(self.team, pid, "Alex")
        assert self.team.players[0].name == "Alex"
        assert rename_player(self.team, pid, "  ")
        assert self.team.players[0].name == "Alex"
        assert not rename_player(self.team, "missing", "X")

    def test_delete_player(self):
        """Test that a deleted player leaves every rotation."""
        clone_rotation(self.team, self.team.rotations[0].id)
        pid = self.team.players[0].id

        assert delete_player(self.team, pid)

        assert len(self.team.players) == 11
        for rotation in self.team.rotations:
            assert rotation.positions[ZoneId.FRONT_LEFT] is None
            assert pid not in rotation.left_bench + rotation.right_bench
        assert not delete_player(self.team, pid)

    def test_rename_team(self):
        """Test team renaming ignores blank names."""
        rename_team(self.team, "Eagles")
        rename_team(self.team, "")

        assert self.team.name == "Eagles"


class TestRotationManagement:
    """Test rotation lifecycle."""

    def setup_method(self):
        """Set up test fixtures."""
        self.team = make_new_team("Team A", 12)
        self.rotation = self.team.rotations[0]

    def test_add_rotation(self):
        """Test appending a seeded rotation."""
        rotation = add_rotation(self.team)

        assert rotation.name == "Rotation 2"
        assert self.team.rotations[-1] is rotation
        assert rotation.positions == self.rotation.positions

    def test_clone_rotation(self):
        """Test that a clone is an independent copy placed after its source."""
        add_rotation(self.team)
        self.rotation.mesh.points["S1T"].x = 300

        cloned = clone_rotation(self.team, self.rotation.id)

        assert self.team.rotations[1] is cloned
        assert cloned.name == "Rotation 1 (Copy)"
        assert cloned.id != self.rotation.id
        assert cloned.positions == self.rotation.positions
        assert cloned.mesh == self.rotation.mesh

        cloned.mesh.points["S1T"].x = 250
        cloned.left_bench.clear()
        assert self.rotation.mesh.points["S1T"].x == 300
        assert len(self.rotation.left_bench) == 3

        assert clone_rotation(self.team, "missing") is None

    def test_delete_rotation(self):
        """Test that the team always keeps a rotation."""
        second = add_rotation(self.team)

        assert delete_rotation(self.team, self.rotation.id)
        assert self.team.rotations == [second]

        assert delete_rotation(self.team, second.id)
        assert len(self.team.rotations) == 1
        assert self.team.rotations[0].name == "Rotation 1"
        assert self.team.rotations[0].id != second.id

        assert not delete_rotation(self.team, "missing")

    def test_rename_rotation(self):
        """Test rotation renaming."""
        assert rename_rotation(self.team, self.rotation.id, " Serve receive ")
        assert self.rotation.name == "Serve receive"
        assert rename_rotation(self.team, self.rotation.id, "")
        assert self.rotation.name == "Serve receive"
        assert not rename_rotation(self.team, "missing", "x")

    def test_reset_layout(self):
        """Test restoring the default mesh."""
        self.rotation.mesh.points["HL"].y = 500

        reset_layout(self.rotation)

        assert self.rotation.mesh == default_mesh()

    def test_repair_loaded_rotation(self):
        """Test repairing a rotation with missing parts."""
        rotation = Rotation(id="r", name="Loaded", positions=None, left_bench=None,
                            right_bench=None, mesh=Mesh(points={"TL": Point(0, 0)}))

        repair_rotation(self.team, rotation)

        assert [rotation.positions[zone] for zone in ZoneId] == self.team.roster_ids[:6]
        assert rotation.mesh == default_mesh()
        assert sorted(rotation.left_bench + rotation.right_bench) == sorted(self.team.roster_ids[6:])

    def test_repair_clamps_mesh(self):
        """Test that repair clamps a complete but invalid mesh."""
        self.rotation.mesh.points["S2T"].x = 990

        repair_rotation(self.team, self.rotation)

        assert self.rotation.mesh.points["S2T"].x == 760
        assert mesh_is_valid(self.rotation.mesh)
