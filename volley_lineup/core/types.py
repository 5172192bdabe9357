"""Type definitions for the volleyball lineup system."""

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np


def new_id() -> str:
    """Generate a unique identifier for teams, players and rotations."""
    return str(uuid.uuid4())


class LineupError(Exception):
    """Base exception for lineup errors."""
    pass


class MeshError(LineupError):
    """Exception raised when a mesh is missing control points."""
    pass


class UnknownZoneError(LineupError, KeyError):
    """Exception raised for an unrecognized zone identifier."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class NotFoundError(LineupError, LookupError):
    """Exception raised when a team, rotation or player id is unknown."""
    pass


class ZoneId(Enum):
    """On-court zones, in canonical order (seeding and hit-test order)."""
    FRONT_LEFT = "front_left"
    FRONT_MIDDLE = "front_middle"      # Setter
    FRONT_RIGHT = "front_right"
    BACK_RIGHT = "back_right"
    BACK_MIDDLE = "back_middle"
    BACK_LEFT = "back_left"

    @property
    def position_number(self) -> int:
        """Position number shown on the lineup sheet."""
        return _POSITION_NUMBERS[self]

    @classmethod
    def parse(cls, value: Union['ZoneId', str, int]) -> 'ZoneId':
        """
        Resolve a zone from an enum member, its name value or its position number.

        Raises:
            UnknownZoneError: if the value names no zone
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for zone in cls:
            if text == zone.value or text == str(zone.position_number):
                return zone
        raise UnknownZoneError(f"Unknown zone identifier: {value!r}")


_POSITION_NUMBERS = {
    ZoneId.FRONT_LEFT: 1,
    ZoneId.FRONT_MIDDLE: 2,
    ZoneId.FRONT_RIGHT: 3,
    ZoneId.BACK_RIGHT: 5,
    ZoneId.BACK_MIDDLE: 6,
    ZoneId.BACK_LEFT: 7,
}

FRONT_ROW = (ZoneId.FRONT_LEFT, ZoneId.FRONT_MIDDLE, ZoneId.FRONT_RIGHT)
BACK_ROW = (ZoneId.BACK_LEFT, ZoneId.BACK_MIDDLE, ZoneId.BACK_RIGHT)


class BenchSide(Enum):
    """Bench queues beside the court."""
    LEFT = "left"
    RIGHT = "right"


class RotateDirection(Enum):
    """Rotation directions."""
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


class LocationKind(Enum):
    """Where a player sits within a rotation."""
    SLOT = "slot"
    LEFT_BENCH = "left"
    RIGHT_BENCH = "right"


@dataclass
class Point:
    """2D point in logical court coordinates."""
    x: float
    y: float

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple."""
        return (self.x, self.y)

    def to_numpy(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.x, self.y], dtype=float)

    def copy(self) -> 'Point':
        return Point(self.x, self.y)


@dataclass
class Mesh:
    """Named control points of one rotation's court layout."""
    points: Dict[str, Point] = field(default_factory=dict)

    def copy(self) -> 'Mesh':
        """Deep copy; no point is shared with the source."""
        return Mesh(points={k: p.copy() for k, p in self.points.items()})


@dataclass
class Player:
    """Roster entry."""
    id: str
    number: int
    name: str


@dataclass
class Rotation:
    """Lineup: six court slots, two bench queues and the court mesh."""
    id: str
    name: str
    positions: Dict[ZoneId, Optional[str]] = field(
        default_factory=lambda: {zone: None for zone in ZoneId}
    )
    left_bench: List[str] = field(default_factory=list)
    right_bench: List[str] = field(default_factory=list)
    mesh: Optional[Mesh] = None

    def copy(self) -> 'Rotation':
        """Deep copy keeping id and name."""
        return copy.deepcopy(self)


@dataclass
class Team:
    """Roster plus its rotations."""
    id: str
    name: str
    players: List[Player] = field(default_factory=list)
    rotations: List[Rotation] = field(default_factory=list)

    @property
    def roster_ids(self) -> List[str]:
        return [p.id for p in self.players]


@dataclass
class LineupState:
    """Everything the application persists: teams, selection and UI mode."""
    teams: List[Team] = field(default_factory=list)
    current_team_id: Optional[str] = None
    current_rotation_id: Optional[str] = None
    edit_layout: bool = False


@dataclass
class Location:
    """Location of a player inside a rotation."""
    kind: LocationKind
    zone: Optional[ZoneId] = None
    index: Optional[int] = None


@dataclass
class SetSlot:
    """Place a player (or nobody) in a court slot."""
    zone: ZoneId
    player_id: Optional[str] = None


@dataclass
class QueueInsert:
    """Insert a player into a bench queue at a position (0 = top)."""
    side: BenchSide
    position: int
    player_id: str


@dataclass
class Rotate:
    """Rotate the lineup one step."""
    direction: RotateDirection


MutationRequest = Union[SetSlot, QueueInsert, Rotate]


@dataclass
class LineupConfig:
    """Configuration for the lineup application."""
    # Storage
    storage_path: str = "lineup_state.json"
    storage_key: str = "volley_lineup_v10"

    # Team seeding
    default_team_name: str = "Team A"
    roster_size: int = 12

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    allow_origins: List[str] = None

    def __post_init__(self):
        if self.allow_origins is None:
            self.allow_origins = ["*"]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'storage_path': self.storage_path,
            'storage_key': self.storage_key,
            'default_team_name': self.default_team_name,
            'roster_size': self.roster_size,
            'log_level': self.log_level,
            'log_dir': self.log_dir,
            'api_host': self.api_host,
            'api_port': self.api_port,
            'allow_origins': list(self.allow_origins),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineupConfig':
        """Create from dictionary."""
        return cls(
            storage_path=data.get('storage_path', 'lineup_state.json'),
            storage_key=data.get('storage_key', 'volley_lineup_v10'),
            default_team_name=data.get('default_team_name', 'Team A'),
            roster_size=int(data.get('roster_size', 12)),
            log_level=data.get('log_level', 'INFO'),
            log_dir=data.get('log_dir', 'logs'),
            api_host=data.get('api_host', '127.0.0.1'),
            api_port=int(data.get('api_port', 8000)),
            allow_origins=data.get('allow_origins'),
        )
