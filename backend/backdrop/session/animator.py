"""
Card background owned by one mounted page.

The background holds the card collection for a viewport class and, while
started, advances it on a fixed cadence from an asyncio task. Each frame is
handed to an optional async callback (the WebSocket sender). stop() cancels
the task and waits for it, so no tick can run after it returns.
"""

from __future__ import annotations

import asyncio
import contextlib
import random
from typing import TYPE_CHECKING

import structlog

from backdrop.logic.cards import TICK_INTERVAL_SECONDS, advance_cards, spawn_cards
from backdrop.logic.render import render_cards

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from backdrop.logic.cards import DecorativeCard, ViewportClass
    from backdrop.logic.render import BackgroundFrame

    FrameCallback = Callable[[BackgroundFrame], Awaitable[None]]

logger = structlog.get_logger()


class CardBackground:
    def __init__(
        self,
        viewport: ViewportClass,
        rng: random.Random | None = None,
        tick_seconds: float = TICK_INTERVAL_SECONDS,
        on_frame: FrameCallback | None = None,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
        self._rng = rng or random.Random()  # noqa: S311
        self._tick_seconds = tick_seconds
        self._on_frame = on_frame
        self._viewport = viewport
        self._cards = spawn_cards(viewport, self._rng)
        self._task: asyncio.Task[None] | None = None

    @property
    def viewport(self) -> ViewportClass:
        return self._viewport

    @property
    def cards(self) -> list[DecorativeCard]:
        return list(self._cards)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_viewport(self, viewport: ViewportClass) -> bool:
        """Rebuild the whole collection for a new viewport class.

        Return False (and keep the current cards) when the class is unchanged.
        """
        if viewport is self._viewport:
            return False
        logger.debug("viewport class changed", old=self._viewport, new=viewport)
        self._viewport = viewport
        self._cards = spawn_cards(viewport, self._rng)
        return True

    def tick(self) -> None:
        self._cards = advance_cards(self._cards, self._rng)

    def frame(self) -> BackgroundFrame:
        return render_cards(self._cards, self._viewport)

    def start(self) -> None:
        """Start ticking. Calling start() on a running background does nothing."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            self.tick()
            if self._on_frame is None:
                continue
            try:
                await self._on_frame(self.frame())
            except (ConnectionError, RuntimeError) as e:
                logger.info("frame delivery failed, stopping background", error=str(e))
                return
