"""Player placement: locating, moving and dropping players within a rotation."""

import logging
from typing import Iterable, Optional, Union

from .membership import normalize
from .rotation import rotate
from .types import (
    BenchSide, Location, LocationKind, MutationRequest, Point, QueueInsert,
    Rotate, Rotation, SetSlot, ZoneId,
)
from .zones import resolve_zone_at

logger = logging.getLogger(__name__)


def locate_player(rotation: Rotation, player_id: str) -> Optional[Location]:
    """Find where a player sits; slots first, then left bench, then right bench."""
    for zone in ZoneId:
        if rotation.positions.get(zone) == player_id:
            return Location(LocationKind.SLOT, zone=zone)
    if player_id in rotation.left_bench:
        return Location(LocationKind.LEFT_BENCH, index=rotation.left_bench.index(player_id))
    if player_id in rotation.right_bench:
        return Location(LocationKind.RIGHT_BENCH, index=rotation.right_bench.index(player_id))
    return None


def remove_from_location(rotation: Rotation, location: Optional[Location], player_id: str):
    """Take a player out of the given location."""
    if location is None:
        return
    if location.kind == LocationKind.SLOT:
        rotation.positions[location.zone] = None
    elif location.kind == LocationKind.LEFT_BENCH and player_id in rotation.left_bench:
        rotation.left_bench.remove(player_id)
    elif location.kind == LocationKind.RIGHT_BENCH and player_id in rotation.right_bench:
        rotation.right_bench.remove(player_id)


def add_to_bench(rotation: Rotation, side: Union[BenchSide, str], player_id: str):
    """Left bench arrivals join the bottom, right bench arrivals the top."""
    if BenchSide(side) == BenchSide.LEFT:
        rotation.left_bench.append(player_id)
    else:
        rotation.right_bench.insert(0, player_id)


def drop_player(roster: Iterable[str], rotation: Rotation, player_id: str,
                source: Location, bench: Optional[BenchSide] = None,
                point: Optional[Point] = None) -> bool:
    """
    Drop a dragged player on a bench or on a court point.

    A drop onto an occupied zone swaps: the displaced player takes the
    incoming player's source slot, or joins the source bench at its
    arrival end.

    Args:
        roster: Player ids of the team
        rotation: Rotation being edited
        player_id: Dragged player
        source: Where the drag started
        bench: Bench the player was dropped on, if any
        point: Court point the player was dropped on, if not a bench

    Returns:
        True if the drop changed the rotation, False for a drop outside
        every target
    """
    if bench is not None:
        remove_from_location(rotation, source, player_id)
        add_to_bench(rotation, bench, player_id)
        normalize(roster, rotation)
        logger.info(f"Dropped {player_id} on {BenchSide(bench).value} bench")
        return True

    target = resolve_zone_at(rotation.mesh, point) if point is not None else None
    if target is None:
        logger.info(f"No drop target for {player_id}")
        return False

    existing = rotation.positions.get(target)
    remove_from_location(rotation, source, player_id)
    rotation.positions[target] = player_id

    if existing:
        if source.kind == LocationKind.SLOT:
            rotation.positions[source.zone] = existing
        elif source.kind == LocationKind.LEFT_BENCH:
            add_to_bench(rotation, BenchSide.LEFT, existing)
        else:
            add_to_bench(rotation, BenchSide.RIGHT, existing)

    normalize(roster, rotation)
    logger.info(f"Dropped {player_id} on {target.value}")
    return True


def apply_request(roster: Iterable[str], rotation: Rotation, request: MutationRequest) -> Rotation:
    """
    Apply one mutation request and normalize.

    Set-slot moves the player out of its current location; an occupant it
    displaces is left unplaced and lands on top of the right bench during
    normalization. Queue-insert clamps the position to the queue length.
    """
    roster = list(roster)

    if isinstance(request, SetSlot):
        zone = ZoneId.parse(request.zone)
        if request.player_id:
            remove_from_location(rotation, locate_player(rotation, request.player_id), request.player_id)
        rotation.positions[zone] = request.player_id or None

    elif isinstance(request, QueueInsert):
        remove_from_location(rotation, locate_player(rotation, request.player_id), request.player_id)
        queue = rotation.left_bench if BenchSide(request.side) == BenchSide.LEFT else rotation.right_bench
        index = min(max(int(request.position), 0), len(queue))
        queue.insert(index, request.player_id)

    elif isinstance(request, Rotate):
        rotate(rotation, request.direction)

    else:
        raise TypeError(f"Unsupported mutation request: {type(request).__name__}")

    return normalize(roster, rotation)
