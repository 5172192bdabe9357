"""Tests for the REST API."""

from fastapi.testclient import TestClient

from volley_lineup.api.app import create_app
from volley_lineup.core import LineupConfig, LineupContext


class TestLineupAPI:
    """Test API endpoints."""

    def setup_method(self):
        """Set up test fixtures."""
        self.context = LineupContext()
        self.client = TestClient(create_app(LineupConfig(), self.context))
        self.team = self.context.current_team
        self.rotation = self.context.current_rotation
        self.base = f"/teams/{self.team.id}/rotations/{self.rotation.id}"
        self.p = self.team.roster_ids

    def test_health(self):
        """Test health check."""
        response = self.client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_state(self):
        """Test the selection listing."""
        data = self.client.get("/state").json()

        assert data["current_team_id"] == self.team.id
        assert data["current_rotation_id"] == self.rotation.id
        assert data["teams"][0]["player_count"] == 12

    def test_get_team(self):
        """Test the team view with player locations."""
        data = self.client.get(f"/teams/{self.team.id}").json()

        assert data["players"][0]["location"] == "1: Front Left"
        assert data["rotations"][0]["positions"]["front_left"] == self.p[0]

    def test_unknown_team(self):
        """Test that unknown ids are 404."""
        assert self.client.get("/teams/missing").status_code == 404
        assert self.client.post("/teams/missing/rotations/x/rotate", json={"direction": "cw"}).status_code == 404
        assert self.client.get(f"/teams/{self.team.id}/rotations/missing").status_code == 404

    def test_create_team(self):
        """Test creating a team."""
        response = self.client.post("/teams", json={"name": "Away"})

        assert response.status_code == 200
        listing = self.client.get("/teams").json()
        assert listing[0]["name"] == "Away"
        assert self.client.get("/state").json()["current_team_id"] == response.json()["id"]

    def test_rotate(self):
        """Test rotating through the API."""
        data = self.client.post(f"{self.base}/rotate", json={"direction": "cw"}).json()

        assert data["positions"]["front_middle"] == self.p[0]
        assert data["positions"]["front_left"] == self.p[7]

    def test_invalid_direction(self):
        """Test request validation."""
        response = self.client.post(f"{self.base}/rotate", json={"direction": "up"})

        assert response.status_code == 422

    def test_set_slot(self):
        """Test set-slot by position number."""
        response = self.client.put(f"{self.base}/slots", json={"zone": "3", "player_id": self.p[7]})

        data = response.json()
        assert data["positions"]["front_right"] == self.p[7]
        assert data["right_bench"][0] == self.p[2]

    def test_set_slot_unknown_zone(self):
        """Test that unknown zones are rejected."""
        response = self.client.put(f"{self.base}/slots", json={"zone": "libero", "player_id": None})

        assert response.status_code == 422

    def test_queue_insert(self):
        """Test queue insert and unknown players."""
        data = self.client.post(f"{self.base}/queue",
                                json={"side": "left", "position": 0, "player_id": self.p[0]}).json()
        assert data["left_bench"][0] == self.p[0]

        response = self.client.post(f"{self.base}/queue",
                                    json={"side": "left", "position": 0, "player_id": "missing"})
        assert response.status_code == 404

    def test_drop(self):
        """Test dropping onto a zone and outside the court."""
        data = self.client.post(f"{self.base}/drop",
                                json={"player_id": self.p[0], "point": {"x": 790, "y": 490}}).json()
        assert data["committed"]
        assert data["rotation"]["positions"]["front_right"] == self.p[0]

        data = self.client.post(f"{self.base}/drop",
                                json={"player_id": self.p[0], "point": {"x": 5, "y": 5}}).json()
        assert not data["committed"]

    def test_mesh_point(self):
        """Test moving a control point and resetting the layout."""
        data = self.client.put(f"{self.base}/mesh/HR", json={"x": 0, "y": 900}).json()
        assert data["mesh"]["HL"] == {"x": 60.0, "y": 900.0}

        assert self.client.put(f"{self.base}/mesh/TL", json={"x": 0, "y": 0}).status_code == 404

        data = self.client.post(f"{self.base}/mesh/reset").json()
        assert data["mesh"]["HL"]["y"] == 760

    def test_zones(self):
        """Test derived zone geometry."""
        zones = self.client.get(f"{self.base}/zones").json()

        assert [z["zone"] for z in zones][:3] == ["front_left", "front_middle", "front_right"]
        assert zones[0]["centroid"] == {"x": 210.0, "y": 490.0}
        assert zones[0]["player_id"] == self.p[0]

    def test_zone_at(self):
        """Test hit testing."""
        assert self.client.get(f"{self.base}/zone-at", params={"x": 500, "y": 1000}).json()["zone"] == "back_middle"
        assert self.client.get(f"{self.base}/zone-at", params={"x": 5, "y": 5}).json()["zone"] is None

    def test_rotation_lifecycle(self):
        """Test new, clone, rename and delete."""
        new = self.client.post(f"/teams/{self.team.id}/rotations").json()
        assert new["name"] == "Rotation 2"

        cloned = self.client.post(f"{self.base}/clone").json()
        assert cloned["name"] == "Rotation 1 (Copy)"

        renamed = self.client.patch(f"{self.base}", json={"name": "Serve"}).json()
        assert renamed["name"] == "Serve"
        assert self.client.patch(f"{self.base}", json={"name": "  "}).status_code == 422

        team = self.client.delete(f"{self.base}").json()
        assert [r["name"] for r in team["rotations"]] == ["Rotation 1 (Copy)", "Rotation 2"]

    def test_players(self):
        """Test adding, renaming and deleting players."""
        player = self.client.post(f"/teams/{self.team.id}/players", json={"name": "Sam"}).json()
        assert player["number"] == 13
        assert player["location"] == "4: Right Bench (#1)"

        team = self.client.patch(f"/teams/{self.team.id}/players/{player['id']}",
                                 json={"name": "Samantha Jones"}).json()
        assert team["players"][-1]["label"] == "SJ"

        team = self.client.delete(f"/teams/{self.team.id}/players/{self.p[0]}").json()
        assert len(team["players"]) == 12
        assert team["rotations"][0]["positions"]["front_left"] is None

    def test_edit_layout(self):
        """Test toggling layout editing."""
        data = self.client.put("/state/edit-layout", json={"enabled": True}).json()

        assert data["edit_layout"]
        assert self.context.state.edit_layout
