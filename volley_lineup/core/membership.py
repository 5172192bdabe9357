"""Membership normalization: every roster player in exactly one place."""

import logging
from typing import Iterable, List, Set

from .types import Rotation, ZoneId

logger = logging.getLogger(__name__)


def _claim(queue: List[str], roster: Set[str], seen: Set[str]) -> List[str]:
    kept = []
    for pid in queue or []:
        if pid in roster and pid not in seen:
            seen.add(pid)
            kept.append(pid)
    return kept


def normalize(roster: Iterable[str], rotation: Rotation) -> Rotation:
    """
    Restore the membership invariant of a rotation, in place.

    Slots are scanned in canonical zone order, then the left bench, then
    the right bench. A player id that is not on the roster, or that was
    already claimed earlier in the scan, is dropped (first occurrence
    wins). Roster players found nowhere are pushed onto the top of the
    right bench in roster order. Idempotent.

    Args:
        roster: Player ids of the team, in roster order
        rotation: Rotation to repair

    Returns:
        The same rotation
    """
    order = list(roster)
    members = set(order)
    seen: Set[str] = set()
    cleared = 0

    positions = {}
    for zone in ZoneId:
        pid = rotation.positions.get(zone)
        if pid and pid in members and pid not in seen:
            seen.add(pid)
            positions[zone] = pid
        else:
            if pid:
                cleared += 1
            positions[zone] = None
    rotation.positions = positions

    rotation.left_bench = _claim(rotation.left_bench, members, seen)
    rotation.right_bench = _claim(rotation.right_bench, members, seen)

    orphans = []
    for pid in order:
        if pid not in seen:
            seen.add(pid)
            orphans.append(pid)
            rotation.right_bench.insert(0, pid)

    if cleared or orphans:
        logger.debug(
            f"Normalized {rotation.name} | cleared_slots={cleared} | orphans_benched={len(orphans)}"
        )
    return rotation
