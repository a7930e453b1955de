from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles

from backdrop.server.websocket import background_websocket
from leaderboard.board.service import LeaderboardService
from leaderboard.board.state import PlayerListState
from leaderboard.players.store import RestPlayerStore
from leaderboard.server.settings import LeaderboardServerSettings, StoreSettings
from leaderboard.views.handlers import (
    STATIC_DIR,
    add_wins,
    create_player,
    create_templates,
    leaderboard_page,
    list_standings,
    reload_standings,
)
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from leaderboard.players.store import PlayerStore


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def create_app(
    settings: LeaderboardServerSettings | None = None,
    store: PlayerStore | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = LeaderboardServerSettings()
    if store is None:  # pragma: no cover
        store = RestPlayerStore(StoreSettings())  # ty: ignore[missing-argument]

    leaderboard = LeaderboardService(store, PlayerListState())

    routes = [
        Route("/", leaderboard_page, methods=["GET"], name="leaderboard_page"),
        Route("/players", create_player, methods=["POST"], name="create_player"),
        Route("/wins", add_wins, methods=["POST"], name="add_wins"),
        Route("/api/players", list_standings, methods=["GET"], name="list_standings"),
        Route("/api/players/reload", reload_standings, methods=["POST"], name="reload_standings"),
        Route("/health", health, methods=["GET"], name="health"),
        WebSocketRoute("/ws/background", background_websocket, name="background"),
        Mount("/static", app=StaticFiles(directory=str(STATIC_DIR)), name="static"),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        await leaderboard.load()
        yield

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.leaderboard = leaderboard
    app.state.templates = create_templates()

    logger.info("leaderboard server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory for uvicorn --factory leaderboard.server.app:get_app."""
    settings = LeaderboardServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
