"""
Leaderboard operations: load, create player, add wins, standings.

Every store failure is caught here, logged and swallowed; callers only learn
whether the operation took effect. Writes are derived from the snapshot taken
when the operation started and replace the local list wholesale, so when a
create and an increment overlap, whichever response lands last wins.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from leaderboard.players.store import PlayerStoreError
from leaderboard.players.types import NewPlayer

if TYPE_CHECKING:
    from leaderboard.board.state import PlayerListState
    from leaderboard.players.store import PlayerStore
    from leaderboard.players.types import Player

logger = structlog.get_logger()

TOP_LABEL = "Top-1"
DEFAULT_NICKNAME_PREFIX = "Player"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Standing(BaseModel):
    """One leaderboard row."""

    position: int
    is_top: bool
    rank_label: str
    id: str
    name: str
    nickname: str
    wins: int
    score: int


def rank_players(players: list[Player]) -> list[Standing]:
    """Sort by wins descending, ties keep their original order.

    Only the first row after sorting is marked as top, even when others share
    its win count.
    """
    ordered = sorted(players, key=lambda p: p.wins, reverse=True)
    return [
        Standing(
            position=index + 1,
            is_top=index == 0,
            rank_label=TOP_LABEL if index == 0 else str(index + 1),
            id=player.id,
            name=player.name,
            nickname=player.nickname,
            wins=player.wins,
            score=player.score,
        )
        for index, player in enumerate(ordered)
    ]


def parse_wins_input(raw: str | None) -> int:
    """Read the leading integer of a form value; anything else is 0."""
    if raw is None:
        return 0
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else 0


def default_nickname(existing_count: int) -> str:
    return f"{DEFAULT_NICKNAME_PREFIX} {existing_count + 1}"


class LeaderboardService:
    def __init__(self, store: PlayerStore, state: PlayerListState) -> None:
        self._store = store
        self._state = state

    @property
    def state(self) -> PlayerListState:
        return self._state

    async def load(self) -> bool:
        """Replace the local list with the store's contents."""
        try:
            players = await self._store.fetch_all()
        except PlayerStoreError as e:
            logger.error("failed to fetch players", error=str(e))
            self._state.mark_loaded()
            return False
        self._state.replace(players)
        self._state.mark_loaded()
        logger.debug("players loaded", count=len(players))
        return True

    async def create_player(self, name: str, nickname: str = "") -> bool:
        name = name.strip()
        if not name:
            return False

        snapshot = self._state.snapshot()
        new_player = NewPlayer(name=name, nickname=nickname.strip() or default_nickname(len(snapshot)))
        try:
            created = await self._store.insert(new_player)
        except PlayerStoreError as e:
            logger.error("failed to add player", error=str(e), name=name)
            return False

        self._state.replace([*snapshot, *created])
        logger.info("player added", name=name, count=len(created))
        return True

    async def add_wins(self, player_id: str | None, increment: int) -> bool:
        if not player_id or increment <= 0:
            return False

        snapshot = self._state.snapshot()
        player = next((p for p in snapshot if p.id == player_id), None)
        if player is None:
            return False

        new_wins = player.wins + increment
        try:
            await self._store.update_wins(player_id, new_wins)
        except PlayerStoreError as e:
            logger.error("failed to update wins", error=str(e), player_id=player_id)
            return False

        self._state.replace([p.model_copy(update={"wins": new_wins}) if p.id == player_id else p for p in snapshot])
        logger.info("wins added", player_id=player_id, wins=new_wins)
        return True

    def standings(self) -> list[Standing]:
        return rank_players(self._state.snapshot())
