"""Team, roster and rotation lifecycle."""

import logging
from typing import List, Optional, Sequence

from .court import clamp_mesh, default_mesh
from .membership import normalize
from .types import MeshError, Player, Rotation, Team, ZoneId, new_id

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_SIZE = 12


def _seed_positions(player_ids: Sequence[str]):
    zones = list(ZoneId)
    return {zone: (player_ids[i] if i < len(player_ids) else None) for i, zone in enumerate(zones)}


def make_new_rotation(name: str, players: Sequence[Player]) -> Rotation:
    """
    Create a rotation with the canonical placement.

    The first six players fill the zones in canonical order; the rest
    alternate between the top of the right bench and the bottom of the
    left bench, starting on the right.
    """
    ids = [p.id for p in players]
    left_bench: List[str] = []
    right_bench: List[str] = []
    for i, pid in enumerate(ids[6:]):
        if i % 2 == 0:
            right_bench.insert(0, pid)
        else:
            left_bench.append(pid)

    return Rotation(
        id=new_id(),
        name=name,
        positions=_seed_positions(ids),
        left_bench=left_bench,
        right_bench=right_bench,
        mesh=clamp_mesh(default_mesh()),
    )


def make_new_team(name: str = "Team A", roster_size: int = DEFAULT_ROSTER_SIZE) -> Team:
    """Create a team with a numbered roster and one default rotation."""
    players = [Player(id=new_id(), number=i + 1, name=str(i + 1)) for i in range(roster_size)]
    team = Team(id=new_id(), name=name, players=players)
    team.rotations = [make_new_rotation("Rotation 1", players)]
    logger.info(f"Created team {name!r} with {roster_size} players")
    return team


def find_player(team: Team, player_id: str) -> Optional[Player]:
    return next((p for p in team.players if p.id == player_id), None)


def find_rotation(team: Team, rotation_id: str) -> Optional[Rotation]:
    return next((r for r in team.rotations if r.id == rotation_id), None)


def repair_rotation(team: Team, rotation: Rotation) -> Rotation:
    """
    Bring a (possibly loaded) rotation back to a consistent state.

    Missing placement, benches or mesh are rebuilt; an existing mesh is
    clamped; membership is normalized against the roster.
    """
    if rotation.positions is None:
        rotation.positions = _seed_positions(team.roster_ids)
    if rotation.left_bench is None:
        rotation.left_bench = []
    if rotation.right_bench is None:
        rotation.right_bench = []

    if rotation.mesh is None:
        rotation.mesh = clamp_mesh(default_mesh())
    else:
        try:
            rotation.mesh = clamp_mesh(rotation.mesh)
        except MeshError as e:
            logger.warning(f"Resetting layout of {rotation.name!r}: {e}")
            rotation.mesh = clamp_mesh(default_mesh())

    return normalize(team.roster_ids, rotation)


def add_player(team: Team, name: Optional[str] = None) -> Player:
    """
    Add a player with the next jersey number.

    The new player lands on top of the right bench in every rotation.
    """
    number = max((p.number for p in team.players), default=0) + 1
    clean = (name or "").strip()
    player = Player(id=new_id(), number=number, name=clean or str(number))
    team.players.append(player)

    for rotation in team.rotations:
        repair_rotation(team, rotation)
        if player.id not in rotation.right_bench:
            rotation.right_bench.insert(0, player.id)
        normalize(team.roster_ids, rotation)

    logger.info(f"Added player #{number} ({player.name}) to {team.name!r}")
    return player


def rename_player(team: Team, player_id: str, name: str) -> bool:
    """Rename a player; blank names are ignored."""
    player = find_player(team, player_id)
    if player is None:
        return False
    clean = (name or "").strip()
    if clean:
        player.name = clean
    return True


def delete_player(team: Team, player_id: str) -> bool:
    """Remove a player from the roster and from every rotation."""
    player = find_player(team, player_id)
    if player is None:
        logger.warning(f"Player not found for delete: {player_id}")
        return False

    team.players = [p for p in team.players if p.id != player_id]
    for rotation in team.rotations:
        for zone, pid in rotation.positions.items():
            if pid == player_id:
                rotation.positions[zone] = None
        if player_id in rotation.left_bench:
            rotation.left_bench.remove(player_id)
        if player_id in rotation.right_bench:
            rotation.right_bench.remove(player_id)
        normalize(team.roster_ids, rotation)

    logger.info(f"Deleted player #{player.number} ({player.name}) from {team.name!r}")
    return True


def add_rotation(team: Team) -> Rotation:
    """Append a freshly seeded rotation named after its position."""
    rotation = make_new_rotation(f"Rotation {len(team.rotations) + 1}", team.players)
    team.rotations.append(rotation)
    return rotation


def clone_rotation(team: Team, rotation_id: str) -> Optional[Rotation]:
    """Deep-copy a rotation and insert the copy right after it."""
    source = find_rotation(team, rotation_id)
    if source is None:
        return None

    cloned = source.copy()
    cloned.id = new_id()
    cloned.name = f"{source.name} (Copy)"
    if cloned.mesh is None:
        cloned.mesh = clamp_mesh(default_mesh())

    team.rotations.insert(team.rotations.index(source) + 1, cloned)
    return cloned


def delete_rotation(team: Team, rotation_id: str) -> bool:
    """Delete a rotation; the team always keeps at least one."""
    if find_rotation(team, rotation_id) is None:
        return False
    team.rotations = [r for r in team.rotations if r.id != rotation_id]
    if not team.rotations:
        team.rotations = [make_new_rotation("Rotation 1", team.players)]
    return True


def rename_rotation(team: Team, rotation_id: str, name: str) -> bool:
    rotation = find_rotation(team, rotation_id)
    if rotation is None:
        return False
    clean = (name or "").strip()
    if clean:
        rotation.name = clean
    return True


def rename_team(team: Team, name: str) -> None:
    clean = (name or "").strip()
    if clean:
        team.name = clean


def reset_layout(rotation: Rotation) -> Rotation:
    """Put the default mesh back."""
    rotation.mesh = clamp_mesh(default_mesh())
    return rotation
