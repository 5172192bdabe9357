"""Display labels for players, zones and locations."""

from typing import Dict

from .placement import locate_player
from .types import LocationKind, Rotation, ZoneId

POSITION_LABELS: Dict[int, str] = {
    1: "Front Left",
    2: "Front Middle (Setter)",
    3: "Front Right",
    4: "Right Bench",
    5: "Back Right",
    6: "Back Middle",
    7: "Back Left",
    8: "Left Bench",
}

RIGHT_BENCH_NUMBER = 4
LEFT_BENCH_NUMBER = 8

MAX_TOKEN_NAME = 10


def zone_caption(zone: ZoneId) -> str:
    """Lower-case caption drawn inside a zone, e.g. 'front left'."""
    return zone.value.replace("_", " ")


def initials_for(name: str) -> str:
    parts = str(name or "").split()
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][:2].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def token_label(name: str) -> str:
    """Short label for a player token; long names collapse to initials."""
    clean = str(name or "").strip()
    if not clean:
        return "?"
    if len(clean) > MAX_TOKEN_NAME:
        return initials_for(clean)
    return clean


def describe_location(rotation: Rotation, player_id: str) -> str:
    """Where a player sits, as shown in the roster list."""
    location = locate_player(rotation, player_id)
    if location is None:
        return "Unplaced"
    if location.kind == LocationKind.SLOT:
        number = location.zone.position_number
        return f"{number}: {POSITION_LABELS[number]}"
    if location.kind == LocationKind.LEFT_BENCH:
        return f"{LEFT_BENCH_NUMBER}: {POSITION_LABELS[LEFT_BENCH_NUMBER]} (#{location.index + 1})"
    return f"{RIGHT_BENCH_NUMBER}: {POSITION_LABELS[RIGHT_BENCH_NUMBER]} (#{location.index + 1})"


def placed_count(rotation: Rotation) -> int:
    """Number of occupied court slots."""
    return sum(1 for pid in rotation.positions.values() if pid)
