"""WebSocket endpoint that streams the card background to one page."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from backdrop.logic.cards import ViewportClass, viewport_class_for_width
from backdrop.server.messages import PingMessage, ViewportMessage, parse_background_message
from backdrop.session.animator import CardBackground

if TYPE_CHECKING:
    from backdrop.logic.render import BackgroundFrame

logger = structlog.get_logger()


def _initial_viewport(websocket: WebSocket, breakpoint_px: int) -> ViewportClass:
    """Classify the width reported in the query string; unknown means regular."""
    raw = websocket.query_params.get("width")
    try:
        width = int(raw) if raw is not None else None
    except ValueError:
        width = None
    if width is None or width < 0:
        return ViewportClass.REGULAR
    return viewport_class_for_width(width, breakpoint_px)


def _initial_rng(websocket: WebSocket) -> random.Random | None:
    """Seed the cards from the page that opened the socket, if it sent a seed."""
    raw = websocket.query_params.get("seed")
    if raw is None:
        return None
    try:
        return random.Random(int(raw))  # noqa: S311
    except ValueError:
        return None


class _FrameSender:
    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def __call__(self, frame: BackgroundFrame) -> None:
        try:
            await self._websocket.send_json(frame.model_dump(mode="json"))
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None


async def background_websocket(websocket: WebSocket) -> None:
    """Mount a card background for this socket and tear it down on disconnect."""
    settings = websocket.app.state.settings
    breakpoint_px: int = settings.breakpoint_px

    await websocket.accept()

    send_frame = _FrameSender(websocket)
    background = CardBackground(
        _initial_viewport(websocket, breakpoint_px),
        rng=_initial_rng(websocket),
        tick_seconds=settings.tick_interval_seconds,
        on_frame=send_frame,
    )
    log = logger.bind(viewport=background.viewport)
    log.info("background mounted", cards=len(background.cards))

    try:
        await send_frame(background.frame())
        background.start()
        while True:
            raw = await websocket.receive_text()
            try:
                message = parse_background_message(raw)
            except (ValueError, ValidationError) as e:
                await websocket.send_json({"type": "error", "message": str(e)})
                continue

            if isinstance(message, ViewportMessage):
                viewport = viewport_class_for_width(message.width, breakpoint_px)
                if background.set_viewport(viewport):
                    log = logger.bind(viewport=viewport)
                    log.info("background rebuilt", cards=len(background.cards))
                    await send_frame(background.frame())
            elif isinstance(message, PingMessage):
                await websocket.send_json({"type": "pong"})
    except (WebSocketDisconnect, ConnectionError):
        pass
    except Exception:
        log.exception("unexpected error in background websocket")
    finally:
        await background.stop()
        log.info("background unmounted")
