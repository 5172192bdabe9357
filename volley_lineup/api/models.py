"""
Pydantic models for the Volleyball Lineup API
Data models for request/response validation
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.types import UnknownZoneError, ZoneId


class RotateDirectionEnum(str, Enum):
    """Rotation direction."""
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


class BenchSideEnum(str, Enum):
    """Bench side."""
    LEFT = "left"
    RIGHT = "right"


def _zone_value(v: str) -> str:
    try:
        return ZoneId.parse(v).value
    except UnknownZoneError as e:
        raise ValueError(str(e))


class PointModel(BaseModel):
    """Point in logical court coordinates."""
    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")


class PlayerModel(BaseModel):
    """Roster entry."""
    id: str = Field(..., description="Player identifier")
    number: int = Field(..., description="Jersey number")
    name: str = Field(..., description="Display name")
    label: str = Field(..., description="Token label (initials for long names)")
    location: str = Field(default="", description="Location in the selected rotation")


class RotationModel(BaseModel):
    """Rotation with slots, benches and mesh."""
    id: str = Field(..., description="Rotation identifier")
    name: str = Field(..., description="Rotation name")
    positions: Dict[str, Optional[str]] = Field(..., description="Player id per zone")
    left_bench: List[str] = Field(default_factory=list, description="Left bench, top first")
    right_bench: List[str] = Field(default_factory=list, description="Right bench, top first")
    mesh: Dict[str, PointModel] = Field(default_factory=dict, description="Mesh control points")


class TeamSummary(BaseModel):
    """Team listing entry."""
    id: str = Field(..., description="Team identifier")
    name: str = Field(..., description="Team name")
    player_count: int = Field(..., description="Number of rostered players")
    rotation_count: int = Field(..., description="Number of rotations")


class TeamModel(BaseModel):
    """Team with roster and rotations."""
    id: str = Field(..., description="Team identifier")
    name: str = Field(..., description="Team name")
    players: List[PlayerModel] = Field(default_factory=list, description="Roster")
    rotations: List[RotationModel] = Field(default_factory=list, description="Rotations")


class StateModel(BaseModel):
    """Selection and team listing."""
    current_team_id: Optional[str] = Field(None, description="Selected team")
    current_rotation_id: Optional[str] = Field(None, description="Selected rotation")
    edit_layout: bool = Field(default=False, description="Layout editing mode")
    teams: List[TeamSummary] = Field(default_factory=list, description="All teams")


class NameRequest(BaseModel):
    """Request carrying a display name."""
    name: str = Field(..., description="New name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('name must not be blank')
        return v.strip()


class PlayerCreateRequest(BaseModel):
    """Request model for adding a player."""
    name: Optional[str] = Field(None, description="Player name; defaults to the jersey number")


class EditLayoutRequest(BaseModel):
    """Request model for toggling layout editing."""
    enabled: bool = Field(..., description="Enable layout editing")


class RotateRequest(BaseModel):
    """Request model for rotating a lineup."""
    direction: RotateDirectionEnum = Field(..., description="Rotation direction")


class SlotRequest(BaseModel):
    """Request model for setting a court slot."""
    zone: str = Field(..., description="Zone name or position number")
    player_id: Optional[str] = Field(None, description="Player to place; empty clears the slot")

    @field_validator('zone')
    @classmethod
    def validate_zone(cls, v):
        return _zone_value(v)


class QueueRequest(BaseModel):
    """Request model for inserting into a bench queue."""
    side: BenchSideEnum = Field(..., description="Bench side")
    position: int = Field(default=0, description="Queue index, 0 is the top")
    player_id: str = Field(..., description="Player to insert")


class DropRequest(BaseModel):
    """Request model for dropping a player, as a finished drag would."""
    player_id: str = Field(..., description="Dragged player")
    bench: Optional[BenchSideEnum] = Field(None, description="Bench dropped on")
    point: Optional[PointModel] = Field(None, description="Court point dropped on")


class DropResponse(BaseModel):
    """Response model for a drop."""
    committed: bool = Field(..., description="Whether the drop changed the rotation")
    rotation: RotationModel = Field(..., description="Rotation after the drop")


class ZoneGeometry(BaseModel):
    """Derived zone geometry."""
    zone: str = Field(..., description="Zone name")
    position_number: int = Field(..., description="Lineup position number")
    caption: str = Field(..., description="Zone caption")
    polygon: List[PointModel] = Field(..., description="Quadrilateral vertices")
    centroid: PointModel = Field(..., description="Vertex mean")
    player_id: Optional[str] = Field(None, description="Occupant")


class ZoneAtResponse(BaseModel):
    """Hit-test result."""
    zone: Optional[str] = Field(None, description="Zone containing the point, if any")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Check timestamp")
    version: str = Field(..., description="API version")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
