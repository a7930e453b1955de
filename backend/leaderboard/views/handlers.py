"""Leaderboard page and form handlers."""

from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, RedirectResponse
from starlette.templating import Jinja2Templates

from backdrop.logic.cards import ViewportClass, spawn_cards
from backdrop.logic.render import render_cards
from leaderboard.board.service import parse_wins_input
from leaderboard.players.types import POINTS_PER_WIN

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from leaderboard.board.service import LeaderboardService

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

DEFAULT_WINS_INPUT = "1"


def create_templates() -> Jinja2Templates:
    """Create the Jinja2 engine for the leaderboard HTML templates."""
    return Jinja2Templates(directory=str(TEMPLATES_DIR))


def _render_page(
    request: Request,
    *,
    name: str = "",
    nickname: str = "",
    player_id: str = "",
    wins: str = DEFAULT_WINS_INPUT,
) -> Response:
    """Render the page; the keyword arguments prefill the form inputs."""
    templates: Jinja2Templates = request.app.state.templates
    service: LeaderboardService = request.app.state.leaderboard
    # The socket is opened with the same seed, so it streams these cards rather than a new set.
    # The stylesheet sizes them and hides the extra ones on compact screens until the first frame.
    background_seed = random.getrandbits(32)  # noqa: S311
    background = render_cards(
        spawn_cards(ViewportClass.REGULAR, random.Random(background_seed)),  # noqa: S311
        ViewportClass.REGULAR,
    )
    return templates.TemplateResponse(
        request,
        "leaderboard.html",
        {
            "loaded": service.state.loaded,
            "standings": service.standings(),
            "players": service.state.snapshot(),
            "points_per_win": POINTS_PER_WIN,
            "background": background,
            "background_seed": background_seed,
            "form": {"name": name, "nickname": nickname, "player_id": player_id, "wins": wins},
        },
    )


async def leaderboard_page(request: Request) -> Response:
    """GET / - render the leaderboard with empty forms."""
    return _render_page(request)


async def create_player(request: Request) -> Response:
    """POST /players - add a player and go back to the page.

    A blank name is ignored. When the store rejects the insert the page is
    rendered again with the submitted values still in the inputs.
    """
    form = await request.form()
    name = str(form.get("name", ""))
    nickname = str(form.get("nickname", ""))
    if not name.strip():
        return RedirectResponse("/", status_code=303)

    service: LeaderboardService = request.app.state.leaderboard
    if await service.create_player(name, nickname):
        return RedirectResponse("/", status_code=303)
    return _render_page(request, name=name, nickname=nickname)


async def add_wins(request: Request) -> Response:
    """POST /wins - add wins to the selected player."""
    form = await request.form()
    player_id = str(form.get("player_id", ""))
    raw_wins = str(form.get("wins", ""))
    increment = parse_wins_input(raw_wins)
    if not player_id or increment <= 0:
        return RedirectResponse("/", status_code=303)

    service: LeaderboardService = request.app.state.leaderboard
    if await service.add_wins(player_id, increment):
        return RedirectResponse("/", status_code=303)
    return _render_page(request, player_id=player_id, wins=raw_wins)


def _standings_payload(service: LeaderboardService) -> dict:
    return {
        "loaded": service.state.loaded,
        "players": [standing.model_dump() for standing in service.standings()],
    }


async def list_standings(request: Request) -> JSONResponse:
    """GET /api/players - current standings as JSON."""
    service: LeaderboardService = request.app.state.leaderboard
    return JSONResponse(_standings_payload(service))


async def reload_standings(request: Request) -> JSONResponse:
    """POST /api/players/reload - fetch the table again and return the standings."""
    service: LeaderboardService = request.app.state.leaderboard
    await service.load()
    return JSONResponse(_standings_payload(service))
