"""
MiEspejo Backend - Supabase Row Store Unit Tests (Mocked)
=========================================================

What:  Tests for SupabaseRowStore with a mocked async Supabase client.
Why:   Tests must not reach a real Supabase project.
How:   The PostgREST query builder is a MagicMock whose chain methods return
       itself; execute() is an AsyncMock returning a fake response.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from postgrest.exceptions import APIError

from miespejo.exceptions import StoreError
from miespejo.store.base import OrderBy
from miespejo.store.supabase_store import SupabaseRowStore, create_supabase_store


@pytest.fixture
def query():
    builder = MagicMock()
    for method in ("select", "eq", "order", "insert", "update"):
        getattr(builder, method).return_value = builder
    builder.execute = AsyncMock(return_value=MagicMock(data=[]))
    return builder


@pytest.fixture
def store(query):
    client = MagicMock()
    client.table.return_value = query
    return SupabaseRowStore(client)


class TestSelect:

    @pytest.mark.asyncio
    async def test_builds_filtered_ordered_query(self, store, query):
        query.execute.return_value = MagicMock(data=[{"id": 1, "nombre": "Leer"}])

        rows = await store.select(
            "habit_types",
            {"user_id": "u1", "is_active": True},
            order=OrderBy("created_at", ascending=True),
        )

        assert rows == [{"id": 1, "nombre": "Leer"}]
        store.client.table.assert_called_once_with("habit_types")
        query.select.assert_called_once_with("*")
        query.eq.assert_any_call("user_id", "u1")
        query.eq.assert_any_call("is_active", True)
        query.order.assert_called_once_with("created_at", desc=False)

    @pytest.mark.asyncio
    async def test_descending_order(self, store, query):
        await store.select("habit_logs", {}, order=OrderBy("fecha_inicio", ascending=False))

        query.order.assert_called_once_with("fecha_inicio", desc=True)

    @pytest.mark.asyncio
    async def test_none_data_becomes_empty_list(self, store, query):
        query.execute.return_value = MagicMock(data=None)

        assert await store.select("habit_types", {"user_id": "u1"}) == []
        query.order.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_error_is_translated(self, store, query):
        query.execute.side_effect = APIError(
            {"message": "permission denied for table habit_types", "code": "42501",
             "hint": None, "details": None}
        )

        with pytest.raises(StoreError) as exc_info:
            await store.select("habit_types", {"user_id": "u1"})

        assert exc_info.value.message == "permission denied for table habit_types"
        assert exc_info.value.table == "habit_types"
        assert exc_info.value.context["code"] == "42501"


class TestInsert:

    @pytest.mark.asyncio
    async def test_returns_inserted_row(self, store, query):
        query.execute.return_value = MagicMock(data=[{"id": 42, "user_id": "u1"}])

        row = await store.insert("habit_logs", {"user_id": "u1"})

        assert row == {"id": 42, "user_id": "u1"}
        query.insert.assert_called_once_with({"user_id": "u1"})

    @pytest.mark.asyncio
    async def test_no_representation_returns_none(self, store, query):
        query.execute.return_value = MagicMock(data=[])

        assert await store.insert("habit_logs", {"user_id": "u1"}) is None

    @pytest.mark.asyncio
    async def test_transport_error_is_translated(self, store, query):
        query.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(StoreError) as exc_info:
            await store.insert("habit_logs", {"user_id": "u1"})

        assert exc_info.value.message == "connection refused"
        assert exc_info.value.context["error_type"] == "ConnectError"


class TestUpdate:

    @pytest.mark.asyncio
    async def test_updates_row_by_id(self, store, query):
        await store.update("habit_logs", 42, {"duracion_segundos": 0})

        query.update.assert_called_once_with({"duracion_segundos": 0})
        query.eq.assert_called_once_with("id", 42)
        query.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_api_error_is_translated(self, store, query):
        query.execute.side_effect = APIError({"message": "JWT expired", "code": "PGRST301"})

        with pytest.raises(StoreError, match="JWT expired"):
            await store.update("habit_logs", 42, {"duracion_segundos": 10})


@pytest.mark.asyncio
async def test_create_supabase_store_uses_service_role_key(test_settings):
    client = MagicMock()
    with patch(
        "miespejo.store.supabase_store.acreate_client",
        new=AsyncMock(return_value=client),
    ) as mock_create:
        store = await create_supabase_store(test_settings)

    mock_create.assert_awaited_once_with(
        "https://test-project.supabase.co", "test-service-role-key"
    )
    assert store.client is client
