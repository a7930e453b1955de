"""Access to the hosted player table.

PlayerStore is the whole contract the leaderboard needs: fetch all rows,
insert one row, and update the win count of one row by id. RestPlayerStore
goes through the PostgREST client (the Supabase REST API) with one request
per call and no retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError
from postgrest.types import ReturnMethod
from pydantic import TypeAdapter, ValidationError

from leaderboard.players.types import NewPlayer, Player

if TYPE_CHECKING:
    from postgrest import APIResponse

    from leaderboard.server.settings import StoreSettings

_players_adapter: TypeAdapter[list[Player]] = TypeAdapter(list[Player])


class PlayerStoreError(Exception):
    """Raised when the hosted store cannot complete a request."""


class PlayerStore(ABC):
    @abstractmethod
    async def fetch_all(self) -> list[Player]: ...

    @abstractmethod
    async def insert(self, new_player: NewPlayer) -> list[Player]:
        """Insert one record and return what the store saved (with its id)."""
        ...

    @abstractmethod
    async def update_wins(self, player_id: str, wins: int) -> None: ...


class RestPlayerStore(PlayerStore):
    def __init__(self, settings: StoreSettings) -> None:
        self._rest_url = f"{settings.url.rstrip('/')}/rest/v1"
        self._table = settings.table
        self._timeout = settings.timeout_seconds
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "apikey": settings.api_key,
            "Authorization": f"Bearer {settings.api_key}",
        }

    def _client(self) -> AsyncPostgrestClient:
        return AsyncPostgrestClient(self._rest_url, headers=self._headers, timeout=self._timeout)

    async def fetch_all(self) -> list[Player]:
        async with self._client() as client:
            response = await self._execute("fetch players", client.from_(self._table).select("*"))
        return self._parse_players(response)

    async def insert(self, new_player: NewPlayer) -> list[Player]:
        async with self._client() as client:
            query = client.from_(self._table).insert(
                [new_player.model_dump()],
                returning=ReturnMethod.representation,
            )
            response = await self._execute("insert player", query)
        return self._parse_players(response)

    async def update_wins(self, player_id: str, wins: int) -> None:
        async with self._client() as client:
            query = client.from_(self._table).update({"wins": wins}, returning=ReturnMethod.minimal).eq("id", player_id)
            await self._execute(f"update player {player_id}", query)

    async def _execute(self, action: str, query: Any) -> APIResponse:  # noqa: ANN401
        try:
            return await query.execute()
        except APIError as e:
            raise PlayerStoreError(f"{action} in {self._table} rejected: {e.message}") from e
        except httpx.HTTPError as e:
            raise PlayerStoreError(f"{action} in {self._table} failed: {e}") from e

    @staticmethod
    def _parse_players(response: APIResponse) -> list[Player]:
        try:
            return _players_adapter.validate_python(response.data)
        except ValidationError as e:
            raise PlayerStoreError(f"Malformed player data: {e}") from e
