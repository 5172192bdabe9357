"""I/O utilities for lineup documents and configuration."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .labels import describe_location
from .types import (
    LineupConfig, LineupState, Mesh, Player, Point, Rotation, Team, ZoneId,
    UnknownZoneError,
)

logger = logging.getLogger(__name__)

STORAGE_VERSION = "volley_lineup_v10"

PathLike = Union[str, Path]


def _is_yaml(filepath: PathLike) -> bool:
    return str(filepath).endswith(('.yaml', '.yml'))


class LineupIO:
    """I/O utilities for lineup data."""

    def save_state(self, state: LineupState, filepath: PathLike):
        """Save the full application state to JSON (or YAML)."""
        data = self.state_to_dict(state)
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w', encoding='utf-8') as f:
            if _is_yaml(filepath):
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

    def load_state(self, filepath: PathLike) -> Optional[LineupState]:
        """
        Load application state.

        Returns:
            The state, or None when the file is missing, empty, corrupt or
            holds no teams
        """
        path = Path(filepath)
        if not path.exists():
            return None

        try:
            text = path.read_text(encoding='utf-8').strip()
            if not text:
                return None
            data = yaml.safe_load(text) if _is_yaml(path) else json.loads(text)
            state = self.dict_to_state(data)
        except (OSError, ValueError, TypeError, KeyError, AttributeError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable lineup state {path}: {e}")
            return None

        if not state.teams:
            return None
        return state

    def export_rotation_csv(self, team: Team, rotation: Rotation, filepath: PathLike):
        """Export where every roster player sits in a rotation."""
        with open(filepath, 'w', newline='', encoding='utf-8') as csvfile:
            fieldnames = ['number', 'name', 'location']
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)

            writer.writeheader()
            for player in team.players:
                writer.writerow({
                    'number': player.number,
                    'name': player.name,
                    'location': describe_location(rotation, player.id)
                })

    def save_config(self, config: LineupConfig, filepath: PathLike):
        """Save configuration to JSON (or YAML)."""
        with open(filepath, 'w', encoding='utf-8') as f:
            if _is_yaml(filepath):
                yaml.safe_dump(config.to_dict(), f, sort_keys=False)
            else:
                json.dump(config.to_dict(), f, indent=2)

    def load_config(self, filepath: Optional[PathLike] = None) -> LineupConfig:
        """Load configuration; defaults to the bundled config file."""
        if filepath is None:
            filepath = Path(__file__).parent.parent / "configs" / "config_lineup.json"

        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) if _is_yaml(filepath) else json.load(f)

        return LineupConfig.from_dict(data or {})

    def state_to_dict(self, state: LineupState) -> Dict[str, Any]:
        """Convert state to dictionary."""
        return {
            'version': STORAGE_VERSION,
            'teams': [self._team_to_dict(t) for t in state.teams],
            'current_team_id': state.current_team_id,
            'current_rotation_id': state.current_rotation_id,
            'ui': {'edit_layout': state.edit_layout}
        }

    def dict_to_state(self, data: Dict[str, Any]) -> LineupState:
        """Convert dictionary to state; camelCase keys are accepted too."""
        ui = data.get('ui') or {}
        return LineupState(
            teams=[self._dict_to_team(t) for t in data.get('teams') or []],
            current_team_id=data.get('current_team_id', data.get('currentTeamId')),
            current_rotation_id=data.get('current_rotation_id', data.get('currentRotationId')),
            edit_layout=bool(ui.get('edit_layout', ui.get('editLayout', False)))
        )

    def _team_to_dict(self, team: Team) -> Dict:
        return {
            'id': team.id,
            'name': team.name,
            'players': [self._player_to_dict(p) for p in team.players],
            'rotations': [self.rotation_to_dict(r) for r in team.rotations]
        }

    def _dict_to_team(self, data: Dict) -> Team:
        return Team(
            id=data['id'],
            name=data.get('name', ''),
            players=[self._dict_to_player(p) for p in data.get('players') or []],
            rotations=[self.dict_to_rotation(r) for r in data.get('rotations') or []]
        )

    def _player_to_dict(self, player: Player) -> Dict:
        return {
            'id': player.id,
            'number': player.number,
            'name': player.name
        }

    def _dict_to_player(self, data: Dict) -> Player:
        return Player(
            id=data['id'],
            number=int(data['number']),
            name=str(data.get('name', data['number']))
        )

    def rotation_to_dict(self, rotation: Rotation) -> Dict:
        """Convert rotation to dictionary."""
        return {
            'id': rotation.id,
            'name': rotation.name,
            'positions': {zone.value: rotation.positions.get(zone) for zone in ZoneId},
            'left_bench': list(rotation.left_bench),
            'right_bench': list(rotation.right_bench),
            'mesh': self.mesh_to_dict(rotation.mesh) if rotation.mesh is not None else None
        }

    def dict_to_rotation(self, data: Dict) -> Rotation:
        """Convert dictionary to rotation; missing parts stay None for repair."""
        positions = None
        if data.get('positions') is not None:
            positions = {}
            for key, pid in data['positions'].items():
                try:
                    positions[ZoneId.parse(key)] = pid or None
                except UnknownZoneError:
                    logger.warning(f"Dropping unknown zone key {key!r} in rotation {data.get('id')}")

        left = data.get('left_bench', data.get('leftBench'))
        right = data.get('right_bench', data.get('rightBench'))
        mesh = data.get('mesh')

        return Rotation(
            id=data['id'],
            name=data.get('name', ''),
            positions=positions,
            left_bench=list(left) if isinstance(left, list) else None,
            right_bench=list(right) if isinstance(right, list) else None,
            mesh=self.dict_to_mesh(mesh) if mesh else None
        )

    def mesh_to_dict(self, mesh: Mesh) -> Dict:
        """Convert mesh to dictionary."""
        return {'pts': {k: {'x': p.x, 'y': p.y} for k, p in mesh.points.items()}}

    def dict_to_mesh(self, data: Dict) -> Mesh:
        """Convert dictionary to mesh."""
        points = data.get('pts') or {}
        return Mesh(points={k: Point(float(p['x']), float(p['y'])) for k, p in points.items()})


class LineupStore:
    """File-backed persistence for the application state."""

    def __init__(self, path: PathLike, io: Optional[LineupIO] = None):
        self.path = Path(path)
        self.io = io or LineupIO()

    def load(self) -> Optional[LineupState]:
        return self.io.load_state(self.path)

    def save(self, state: LineupState):
        self.io.save_state(state, self.path)
        logger.debug(f"Saved lineup state to {self.path}")
