from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from postgrest.exceptions import APIError
from postgrest.types import ReturnMethod

from leaderboard.players.store import PlayerStoreError, RestPlayerStore
from leaderboard.players.types import NewPlayer
from leaderboard.server.settings import StoreSettings


@pytest.fixture
def store():
    return RestPlayerStore(StoreSettings(url="https://db.example.co/", api_key="anon-key"))


def _patched_client():
    """Patch the PostgREST client and return (patcher, client_class, table)."""
    patcher = patch("leaderboard.players.store.AsyncPostgrestClient")
    mock_client = patcher.start()
    mock_instance = MagicMock()
    mock_client.return_value.__aenter__.return_value = mock_instance
    return patcher, mock_client, mock_instance.from_.return_value


def _executes(query, data=None, side_effect=None):
    query.execute = AsyncMock(return_value=SimpleNamespace(data=data), side_effect=side_effect)
    return query.execute


class TestRestPlayerStoreFetchAll:
    async def test_returns_players(self, store):
        patcher, mock_client, table = _patched_client()
        _executes(table.select.return_value, [{"id": "p1", "name": "Ann", "nickname": "Ace", "wins": 4}])
        try:
            players = await store.fetch_all()
        finally:
            patcher.stop()

        assert [(p.id, p.wins) for p in players] == [("p1", 4)]
        table.select.assert_called_once_with("*")
        args, kwargs = mock_client.call_args
        assert args == ("https://db.example.co/rest/v1",)
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
        assert kwargs["timeout"] == 5.0

    async def test_reads_configured_table(self):
        store = RestPlayerStore(StoreSettings(url="https://db.example.co", api_key="k", table="durak"))
        patcher, mock_client, table = _patched_client()
        _executes(table.select.return_value, [])
        try:
            assert await store.fetch_all() == []
        finally:
            patcher.stop()

        mock_client.return_value.__aenter__.return_value.from_.assert_called_once_with("durak")

    async def test_connection_error_raises_store_error(self, store):
        patcher, _, table = _patched_client()
        _executes(table.select.return_value, side_effect=httpx.ConnectError("refused"))
        try:
            with pytest.raises(PlayerStoreError, match="refused"):
                await store.fetch_all()
        finally:
            patcher.stop()

    async def test_rejected_request_raises_store_error(self, store):
        patcher, _, table = _patched_client()
        _executes(
            table.select.return_value,
            side_effect=APIError({"message": "invalid key", "code": "401", "hint": None, "details": None}),
        )
        try:
            with pytest.raises(PlayerStoreError, match="invalid key"):
                await store.fetch_all()
        finally:
            patcher.stop()

    async def test_malformed_body_raises_store_error(self, store):
        patcher, _, table = _patched_client()
        _executes(table.select.return_value, {"not": "a list"})
        try:
            with pytest.raises(PlayerStoreError, match="Malformed"):
                await store.fetch_all()
        finally:
            patcher.stop()


class TestRestPlayerStoreInsert:
    async def test_inserts_single_record_and_returns_stored_row(self, store):
        patcher, _, table = _patched_client()
        _executes(table.insert.return_value, [{"id": 9, "name": "Bob", "nickname": "Player 1", "wins": 0}])
        try:
            created = await store.insert(NewPlayer(name="Bob", nickname="Player 1"))
        finally:
            patcher.stop()

        assert created[0].id == "9"
        table.insert.assert_called_once_with(
            [{"name": "Bob", "nickname": "Player 1", "wins": 0}],
            returning=ReturnMethod.representation,
        )


class TestRestPlayerStoreUpdateWins:
    async def test_updates_by_id(self, store):
        patcher, _, table = _patched_client()
        execute = _executes(table.update.return_value.eq.return_value, [])
        try:
            await store.update_wins("p1", 7)
        finally:
            patcher.stop()

        table.update.assert_called_once_with({"wins": 7}, returning=ReturnMethod.minimal)
        table.update.return_value.eq.assert_called_once_with("id", "p1")
        execute.assert_awaited_once()

    async def test_server_error_raises_store_error(self, store):
        patcher, _, table = _patched_client()
        _executes(
            table.update.return_value.eq.return_value,
            side_effect=APIError({"message": "boom", "code": "500", "hint": None, "details": None}),
        )
        try:
            with pytest.raises(PlayerStoreError, match="update player p1"):
                await store.update_wins("p1", 7)
        finally:
            patcher.stop()
