"""Local mirror of the player table shared by page rendering and form handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from leaderboard.players.types import Player

    Listener = Callable[[list["Player"]], None]


class PlayerListState:
    """Observable value cell holding the current player list.

    Readers get a copy; writers replace the list as a whole. Listeners run
    synchronously after each write, in subscription order.
    """

    def __init__(self) -> None:
        self._players: list[Player] = []
        self._loaded = False
        self._listeners: list[Listener] = []

    @property
    def loaded(self) -> bool:
        """True once the first load attempt has finished, even if it failed."""
        return self._loaded

    def mark_loaded(self) -> None:
        self._loaded = True

    def snapshot(self) -> list[Player]:
        return list(self._players)

    def replace(self, players: list[Player]) -> None:
        self._players = list(players)
        for listener in list(self._listeners):
            listener(self.snapshot())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
