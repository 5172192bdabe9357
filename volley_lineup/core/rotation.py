"""Positional rotation of a lineup."""

import logging
from typing import List, Optional, Union

from .types import Rotation, RotateDirection, ZoneId

logger = logging.getLogger(__name__)


def _pop_top(queue: List[str]) -> Optional[str]:
    return queue.pop(0) if queue else None


def _pop_bottom(queue: List[str]) -> Optional[str]:
    return queue.pop() if queue else None


def rotate_clockwise(rotation: Rotation) -> Rotation:
    """
    Rotate one step clockwise, in place.

    Front right leaves for the top of the right bench and back left for
    the bottom of the left bench; the rows shift toward them; front left
    is refilled from the top of the left bench and back right from the
    bottom of the right bench. Empty slots and empty benches are allowed.
    """
    pos = rotation.positions
    fl, fm, fr = pos.get(ZoneId.FRONT_LEFT), pos.get(ZoneId.FRONT_MIDDLE), pos.get(ZoneId.FRONT_RIGHT)
    br, bm, bl = pos.get(ZoneId.BACK_RIGHT), pos.get(ZoneId.BACK_MIDDLE), pos.get(ZoneId.BACK_LEFT)

    if fr:
        rotation.right_bench.insert(0, fr)
    if bl:
        rotation.left_bench.append(bl)

    from_left = _pop_top(rotation.left_bench)
    from_right = _pop_bottom(rotation.right_bench)

    pos[ZoneId.FRONT_RIGHT] = fm or None
    pos[ZoneId.FRONT_MIDDLE] = fl or None
    pos[ZoneId.FRONT_LEFT] = from_left

    pos[ZoneId.BACK_LEFT] = bm or None
    pos[ZoneId.BACK_MIDDLE] = br or None
    pos[ZoneId.BACK_RIGHT] = from_right

    logger.debug(f"Rotated clockwise: {rotation.name}")
    return rotation


def rotate_counter_clockwise(rotation: Rotation) -> Rotation:
    """
    Rotate one step counter-clockwise, in place.

    Exact inverse of rotate_clockwise whenever all six slots are occupied:
    front left goes to the top of the left bench and back right to the
    bottom of the right bench, then front right is refilled from the top
    of the right bench and back left from the bottom of the left bench.
    """
    pos = rotation.positions
    fl, fm, fr = pos.get(ZoneId.FRONT_LEFT), pos.get(ZoneId.FRONT_MIDDLE), pos.get(ZoneId.FRONT_RIGHT)
    br, bm, bl = pos.get(ZoneId.BACK_RIGHT), pos.get(ZoneId.BACK_MIDDLE), pos.get(ZoneId.BACK_LEFT)

    if fl:
        rotation.left_bench.insert(0, fl)
    if br:
        rotation.right_bench.append(br)

    into_back_left = _pop_bottom(rotation.left_bench)
    into_front_right = _pop_top(rotation.right_bench)

    pos[ZoneId.FRONT_LEFT] = fm or None
    pos[ZoneId.FRONT_MIDDLE] = fr or None
    pos[ZoneId.FRONT_RIGHT] = into_front_right

    pos[ZoneId.BACK_RIGHT] = bm or None
    pos[ZoneId.BACK_MIDDLE] = bl or None
    pos[ZoneId.BACK_LEFT] = into_back_left

    logger.debug(f"Rotated counter-clockwise: {rotation.name}")
    return rotation


def rotate(rotation: Rotation, direction: Union[RotateDirection, str]) -> Rotation:
    """Rotate one step in the given direction."""
    direction = RotateDirection(direction)
    if direction == RotateDirection.CLOCKWISE:
        return rotate_clockwise(rotation)
    return rotate_counter_clockwise(rotation)
