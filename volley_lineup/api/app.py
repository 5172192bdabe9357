#!/usr/bin/env python3
"""
Volleyball Lineup REST API Application
FastAPI-based REST API over the lineup context
"""

import argparse
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.io_utils import LineupIO, LineupStore
from ..core.labels import describe_location, token_label, zone_caption
from ..core.logging_utils import get_logger, setup_logging
from ..core.session import LineupContext
from ..core.types import (
    BenchSide, LineupConfig, LineupError, NotFoundError, Point, QueueInsert,
    Rotation, SetSlot, Team, ZoneId,
)
from ..core.zones import centroid, resolve_zone_at, zone_layout
from .models import (
    DropRequest, DropResponse, EditLayoutRequest, HealthResponse, NameRequest,
    PlayerCreateRequest, PlayerModel, PointModel, QueueRequest, RotateRequest,
    RotationModel, SlotRequest, StateModel, TeamModel, TeamSummary,
    ZoneAtResponse, ZoneGeometry,
)

API_VERSION = "1.0.0"

api_logger = get_logger("api")


def rotation_to_model(rotation: Rotation) -> RotationModel:
    return RotationModel(
        id=rotation.id,
        name=rotation.name,
        positions={zone.value: rotation.positions.get(zone) for zone in ZoneId},
        left_bench=list(rotation.left_bench),
        right_bench=list(rotation.right_bench),
        mesh={k: PointModel(x=p.x, y=p.y) for k, p in rotation.mesh.points.items()},
    )


def team_to_model(team: Team, rotation: Optional[Rotation] = None) -> TeamModel:
    """Full team; player locations refer to the given rotation."""
    rotation = rotation or team.rotations[0]
    return TeamModel(
        id=team.id,
        name=team.name,
        players=[
            PlayerModel(
                id=p.id,
                number=p.number,
                name=p.name,
                label=token_label(p.name),
                location=describe_location(rotation, p.id),
            )
            for p in team.players
        ],
        rotations=[rotation_to_model(r) for r in team.rotations],
    )


def team_to_summary(team: Team) -> TeamSummary:
    return TeamSummary(
        id=team.id,
        name=team.name,
        player_count=len(team.players),
        rotation_count=len(team.rotations),
    )


def create_app(config: Optional[LineupConfig] = None,
               context: Optional[LineupContext] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Application configuration
        context: Lineup context to serve; loaded from the configured
            storage path when omitted

    Returns:
        FastAPI application
    """
    config = config or LineupConfig()
    if context is None:
        context = LineupContext.from_store(LineupStore(config.storage_path), config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        api_logger.info("Starting Volleyball Lineup API")
        try:
            yield
        finally:
            api_logger.info("Volleyball Lineup API stopped")

    app = FastAPI(
        title="Volleyball Lineup API",
        description="REST API for volleyball rotations, benches and court layouts",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.context = context

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": "NotFound", "message": str(exc)})

    @app.exception_handler(LineupError)
    async def lineup_error_handler(request: Request, exc: LineupError):
        api_logger.warning(f"Rejected request {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"error": type(exc).__name__, "message": str(exc)})

    def get_context(request: Request) -> LineupContext:
        return request.app.state.context

    @app.get("/", response_model=Dict[str, str])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "Volleyball Lineup API",
            "version": API_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", timestamp=datetime.now().isoformat(), version=API_VERSION)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def state_model(ctx: LineupContext) -> StateModel:
        return StateModel(
            current_team_id=ctx.state.current_team_id,
            current_rotation_id=ctx.state.current_rotation_id,
            edit_layout=ctx.state.edit_layout,
            teams=[team_to_summary(t) for t in ctx.state.teams],
        )

    @app.get("/state", response_model=StateModel)
    async def get_state(ctx: LineupContext = Depends(get_context)):
        """Current selection and team listing."""
        return state_model(ctx)

    @app.put("/state/edit-layout", response_model=StateModel)
    async def set_edit_layout(body: EditLayoutRequest, ctx: LineupContext = Depends(get_context)):
        ctx.set_edit_layout(body.enabled)
        return state_model(ctx)

    # ------------------------------------------------------------------
    # Teams and players
    # ------------------------------------------------------------------

    def team_view(ctx: LineupContext, team: Team) -> TeamModel:
        rotation = ctx.current_rotation if team is ctx.current_team else None
        return team_to_model(team, rotation)

    @app.get("/teams", response_model=List[TeamSummary])
    async def list_teams(ctx: LineupContext = Depends(get_context)):
        return [team_to_summary(t) for t in ctx.state.teams]

    @app.post("/teams", response_model=TeamModel)
    async def create_team(body: Optional[NameRequest] = None, ctx: LineupContext = Depends(get_context)):
        """Create a team; it is listed first and selected."""
        team = ctx.new_team(body.name if body else None)
        return team_view(ctx, team)

    @app.get("/teams/{team_id}", response_model=TeamModel)
    async def get_team(team_id: str, ctx: LineupContext = Depends(get_context)):
        return team_view(ctx, ctx.team(team_id))

    @app.patch("/teams/{team_id}", response_model=TeamModel)
    async def rename_team(team_id: str, body: NameRequest, ctx: LineupContext = Depends(get_context)):
        ctx.rename_team(body.name, team_id=team_id)
        return team_view(ctx, ctx.team(team_id))

    @app.delete("/teams/{team_id}", response_model=StateModel)
    async def delete_team(team_id: str, ctx: LineupContext = Depends(get_context)):
        ctx.delete_team(team_id)
        return state_model(ctx)

    @app.post("/teams/{team_id}/select", response_model=StateModel)
    async def select_team(team_id: str, ctx: LineupContext = Depends(get_context)):
        ctx.select_team(team_id)
        return state_model(ctx)

    @app.post("/teams/{team_id}/players", response_model=PlayerModel)
    async def add_player(team_id: str, body: Optional[PlayerCreateRequest] = None,
                         ctx: LineupContext = Depends(get_context)):
        """Add a player; it joins the top of the right bench in every rotation."""
        player = ctx.add_player(body.name if body else None, team_id=team_id)
        _, rotation = ctx.resolve(team_id)
        return PlayerModel(
            id=player.id,
            number=player.number,
            name=player.name,
            label=token_label(player.name),
            location=describe_location(rotation, player.id),
        )

    @app.patch("/teams/{team_id}/players/{player_id}", response_model=TeamModel)
    async def rename_player(team_id: str, player_id: str, body: NameRequest,
                            ctx: LineupContext = Depends(get_context)):
        ctx.rename_player(player_id, body.name, team_id=team_id)
        return team_view(ctx, ctx.team(team_id))

    @app.delete("/teams/{team_id}/players/{player_id}", response_model=TeamModel)
    async def delete_player(team_id: str, player_id: str, ctx: LineupContext = Depends(get_context)):
        """Remove a player from the roster and every rotation."""
        ctx.delete_player(player_id, team_id=team_id)
        return team_view(ctx, ctx.team(team_id))

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------

    @app.post("/teams/{team_id}/rotations", response_model=RotationModel)
    async def new_rotation(team_id: str, ctx: LineupContext = Depends(get_context)):
        return rotation_to_model(ctx.new_rotation(team_id=team_id))

    @app.get("/teams/{team_id}/rotations/{rotation_id}", response_model=RotationModel)
    async def get_rotation(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        _, rotation = ctx.resolve(team_id, rotation_id)
        return rotation_to_model(rotation)

    @app.patch("/teams/{team_id}/rotations/{rotation_id}", response_model=RotationModel)
    async def rename_rotation(team_id: str, rotation_id: str, body: NameRequest,
                              ctx: LineupContext = Depends(get_context)):
        ctx.rename_rotation(body.name, team_id=team_id, rotation_id=rotation_id)
        _, rotation = ctx.resolve(team_id, rotation_id)
        return rotation_to_model(rotation)

    @app.delete("/teams/{team_id}/rotations/{rotation_id}", response_model=TeamModel)
    async def delete_rotation(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        """Delete a rotation; the team always keeps at least one."""
        ctx.delete_rotation(team_id=team_id, rotation_id=rotation_id)
        return team_view(ctx, ctx.team(team_id))

    @app.post("/teams/{team_id}/rotations/{rotation_id}/clone", response_model=RotationModel)
    async def clone_rotation(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        return rotation_to_model(ctx.clone_rotation(team_id=team_id, rotation_id=rotation_id))

    @app.post("/teams/{team_id}/rotations/{rotation_id}/select", response_model=StateModel)
    async def select_rotation(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        ctx.select_team(team_id)
        ctx.select_rotation(rotation_id)
        return state_model(ctx)

    @app.post("/teams/{team_id}/rotations/{rotation_id}/rotate", response_model=RotationModel)
    async def rotate_lineup(team_id: str, rotation_id: str, body: RotateRequest,
                            ctx: LineupContext = Depends(get_context)):
        """Rotate the lineup one step."""
        rotation = ctx.rotate(body.direction.value, team_id=team_id, rotation_id=rotation_id)
        return rotation_to_model(rotation)

    @app.put("/teams/{team_id}/rotations/{rotation_id}/slots", response_model=RotationModel)
    async def set_slot(team_id: str, rotation_id: str, body: SlotRequest,
                       ctx: LineupContext = Depends(get_context)):
        """Place a player in a court slot, or clear it."""
        request = SetSlot(zone=ZoneId(body.zone), player_id=body.player_id)
        return rotation_to_model(ctx.apply(request, team_id=team_id, rotation_id=rotation_id))

    @app.post("/teams/{team_id}/rotations/{rotation_id}/queue", response_model=RotationModel)
    async def queue_insert(team_id: str, rotation_id: str, body: QueueRequest,
                           ctx: LineupContext = Depends(get_context)):
        """Insert a player into a bench queue."""
        team, _ = ctx.resolve(team_id, rotation_id)
        if body.player_id not in team.roster_ids:
            raise NotFoundError(f"Player not found: {body.player_id}")
        request = QueueInsert(side=BenchSide(body.side.value), position=body.position, player_id=body.player_id)
        return rotation_to_model(ctx.apply(request, team_id=team_id, rotation_id=rotation_id))

    @app.post("/teams/{team_id}/rotations/{rotation_id}/drop", response_model=DropResponse)
    async def drop_player(team_id: str, rotation_id: str, body: DropRequest,
                          ctx: LineupContext = Depends(get_context)):
        """Move a player as a completed drag onto a bench or court point would."""
        committed = ctx.drop(
            body.player_id,
            bench=BenchSide(body.bench.value) if body.bench else None,
            point=Point(body.point.x, body.point.y) if body.point else None,
            team_id=team_id,
            rotation_id=rotation_id,
        )
        _, rotation = ctx.resolve(team_id, rotation_id)
        return DropResponse(committed=committed, rotation=rotation_to_model(rotation))

    # ------------------------------------------------------------------
    # Court layout
    # ------------------------------------------------------------------

    @app.put("/teams/{team_id}/rotations/{rotation_id}/mesh/{key}", response_model=RotationModel)
    async def move_mesh_point(team_id: str, rotation_id: str, key: str, body: PointModel,
                              ctx: LineupContext = Depends(get_context)):
        """Move one editable control point; the mesh is re-clamped."""
        rotation = ctx.move_mesh_point(key, Point(body.x, body.y), team_id=team_id, rotation_id=rotation_id)
        return rotation_to_model(rotation)

    @app.post("/teams/{team_id}/rotations/{rotation_id}/mesh/reset", response_model=RotationModel)
    async def reset_layout(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        return rotation_to_model(ctx.reset_layout(team_id=team_id, rotation_id=rotation_id))

    @app.get("/teams/{team_id}/rotations/{rotation_id}/zones", response_model=List[ZoneGeometry])
    async def get_zones(team_id: str, rotation_id: str, ctx: LineupContext = Depends(get_context)):
        """Zone polygons derived from the rotation's mesh, in canonical order."""
        _, rotation = ctx.resolve(team_id, rotation_id)
        zones = []
        for zone, polygon in zone_layout(rotation.mesh).items():
            center = centroid(polygon)
            zones.append(ZoneGeometry(
                zone=zone.value,
                position_number=zone.position_number,
                caption=zone_caption(zone),
                polygon=[PointModel(x=p.x, y=p.y) for p in polygon],
                centroid=PointModel(x=center.x, y=center.y),
                player_id=rotation.positions.get(zone),
            ))
        return zones

    @app.get("/teams/{team_id}/rotations/{rotation_id}/zone-at", response_model=ZoneAtResponse)
    async def zone_at(team_id: str, rotation_id: str, x: float, y: float,
                      ctx: LineupContext = Depends(get_context)):
        """Zone containing a court point."""
        _, rotation = ctx.resolve(team_id, rotation_id)
        zone = resolve_zone_at(rotation.mesh, Point(x, y))
        return ZoneAtResponse(zone=zone.value if zone else None)

    return app


def main():
    """Run the API with uvicorn."""
    parser = argparse.ArgumentParser(description='Serve the volleyball lineup API')
    parser.add_argument('--config', help='Path to configuration file (JSON or YAML)')
    parser.add_argument('--host', help='Bind address')
    parser.add_argument('--port', type=int, help='Bind port')
    parser.add_argument('--storage', help='Path to lineup state file')

    args = parser.parse_args()

    config = LineupIO().load_config(args.config)
    if args.storage:
        config.storage_path = args.storage
    setup_logging(log_dir=config.log_dir)

    host = args.host or config.api_host
    port = args.port or config.api_port
    api_logger.info(f"Serving lineup state from {config.storage_path} on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    main()
