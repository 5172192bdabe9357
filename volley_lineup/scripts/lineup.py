#!/usr/bin/env python3
"""Show and edit saved volleyball lineups."""

import argparse
from pathlib import Path
from typing import List, Optional

from volley_lineup.core import (
    LineupContext, LineupError, LineupIO, LineupStore, RotateDirection, ZoneId,
    describe_location, placed_count, token_label,
)
from volley_lineup.core.logging_utils import log_operation, quick_setup_logging


def display_rotation(context: LineupContext):
    """Display the selected rotation in a formatted table."""
    team = context.current_team
    rotation = context.current_rotation
    names = {p.id: f"#{p.number} {token_label(p.name)}" for p in team.players}

    print(f"\n{team.name} | {rotation.name} ({placed_count(rotation)}/6 on court)")
    print("=" * 60)
    for row in ((ZoneId.FRONT_LEFT, ZoneId.FRONT_MIDDLE, ZoneId.FRONT_RIGHT),
                (ZoneId.BACK_LEFT, ZoneId.BACK_MIDDLE, ZoneId.BACK_RIGHT)):
        cells = [names.get(rotation.positions.get(zone), "-") for zone in row]
        print(" | ".join(f"{cell:<18}" for cell in cells))
    print("-" * 60)
    print(f"{'Left bench:':<13} {', '.join(names[pid] for pid in rotation.left_bench) or '-'}")
    print(f"{'Right bench:':<13} {', '.join(names[pid] for pid in rotation.right_bench) or '-'}")


def display_roster(context: LineupContext):
    """Display every player with their location in the selected rotation."""
    rotation = context.current_rotation
    print(f"\n{'No':<4} {'Name':<24} {'Location':<28}")
    print("-" * 60)
    for player in context.current_team.players:
        print(f"{player.number:<4} {player.name:<24} {describe_location(rotation, player.id):<28}")


def select(context: LineupContext, team: Optional[str], rotation: Optional[str]):
    """Select a team and rotation by id or name."""
    if team:
        match = next((t for t in context.state.teams if team in (t.id, t.name)), None)
        if match is None:
            raise LineupError(f"Team not found: {team}")
        context.select_team(match.id)
    if rotation:
        match = next((r for r in context.current_team.rotations if rotation in (r.id, r.name)), None)
        if match is None:
            raise LineupError(f"Rotation not found: {rotation}")
        context.select_rotation(match.id)


def main(argv: Optional[List[str]] = None) -> int:
    """Main lineup function."""
    parser = argparse.ArgumentParser(description='Show and edit volleyball lineups')
    parser.add_argument('--state', help='Path to lineup state file (JSON or YAML)')
    parser.add_argument('--config', help='Path to configuration file')
    parser.add_argument('--team', help='Team id or name')
    parser.add_argument('--rotation', help='Rotation id or name')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('show', help='Show the selected rotation and roster')
    rotate_parser = subparsers.add_parser('rotate', help='Rotate the selected rotation')
    rotate_parser.add_argument('direction', choices=[d.value for d in RotateDirection])
    rotate_parser.add_argument('--steps', type=int, default=1, help='Number of steps')
    subparsers.add_parser('reset-layout', help='Restore the default court layout')
    new_parser = subparsers.add_parser('new-rotation', help='Add a freshly seeded rotation')
    new_parser.add_argument('--name', help='Rotation name')
    export_parser = subparsers.add_parser('export-csv', help='Export player locations to CSV')
    export_parser.add_argument('output', help='Output CSV path')

    args = parser.parse_args(argv)
    logger = quick_setup_logging(args.log_level)

    io_utils = LineupIO()
    config = io_utils.load_config(args.config)
    store = LineupStore(args.state or config.storage_path, io_utils)
    context = LineupContext.from_store(store, config)

    try:
        select(context, args.team, args.rotation)
    except LineupError as e:
        print(f"Error: {e}")
        return 1

    command = args.command or 'show'
    if command == 'rotate':
        with log_operation(f"rotate {args.direction} x{args.steps}", context.current_team,
                           context.current_rotation, logger=logger):
            for _ in range(max(args.steps, 0)):
                context.rotate(args.direction)
    elif command == 'reset-layout':
        context.reset_layout()
        print(f"Layout reset for {context.current_rotation.name}")
    elif command == 'new-rotation':
        rotation = context.new_rotation()
        if args.name:
            context.rename_rotation(args.name, rotation_id=rotation.id)
        print(f"Created rotation: {rotation.name}")
    elif command == 'export-csv':
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        io_utils.export_rotation_csv(context.current_team, context.current_rotation, output)
        print(f"Exported {context.current_rotation.name} to: {output}")
        return 0

    display_rotation(context)
    display_roster(context)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
