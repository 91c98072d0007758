"""
MiEspejo Backend - Supabase Row Store
======================================

What:  RowStore implementation on top of the async Supabase client (PostgREST).
How:   Builds one PostgREST request per call and awaits it. Errors reported by
       PostgREST (APIError) or by the HTTP transport (httpx.HTTPError) are
       translated into StoreError carrying the original message.
Who:   Created once in the application lifespan and handed to HabitService.

No retries: a failed call is reported to the caller immediately.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from miespejo.config import Settings
from miespejo.exceptions import StoreError
from miespejo.store.base import OrderBy, RowStore

logger = logging.getLogger(__name__)


def _error_message(exc: Exception) -> str:
    """Extracts the human-readable text of a PostgREST or transport error."""
    if isinstance(exc, APIError) and exc.message:
        return exc.message
    return str(exc) or type(exc).__name__


class SupabaseRowStore(RowStore):
    """
    Row store backed by a Supabase project.

    Usage:
        client = await acreate_client(url, key)
        store = SupabaseRowStore(client)
        rows = await store.select("habit_types", {"user_id": "u1"})
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: Optional[OrderBy] = None,
    ) -> List[Dict[str, Any]]:
        query = self.client.table(table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        if order is not None:
            query = query.order(order.column, desc=not order.ascending)

        try:
            response = await query.execute()
        except (APIError, httpx.HTTPError) as e:
            raise self._store_error("select", table, e) from e

        return list(response.data or [])

    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            response = await self.client.table(table).insert(dict(row)).execute()
        except (APIError, httpx.HTTPError) as e:
            raise self._store_error("insert", table, e) from e

        # PostgREST returns the inserted rows (Prefer: return=representation)
        if response.data:
            return response.data[0]
        return None

    async def update(self, table: str, row_id: Any, patch: Mapping[str, Any]) -> None:
        try:
            await self.client.table(table).update(dict(patch)).eq("id", row_id).execute()
        except (APIError, httpx.HTTPError) as e:
            raise self._store_error("update", table, e) from e

    @staticmethod
    def _store_error(action: str, table: str, exc: Exception) -> StoreError:
        message = _error_message(exc)
        logger.error("Supabase %s on %s failed: %s", action, table, message)
        context: Dict[str, Any] = {"action": action, "error_type": type(exc).__name__}
        if isinstance(exc, APIError) and exc.code:
            context["code"] = exc.code
        return StoreError(message=message, table=table, context=context)


async def create_supabase_store(settings: Settings) -> SupabaseRowStore:
    """
    What:  Connects the async Supabase client with the service role key.
    When:  Once, during application startup, after settings validation.
    """
    client = await acreate_client(settings.supabase_url, settings.supabase_service_role_key)
    logger.info("Supabase client created for %s", settings.supabase_url)
    return SupabaseRowStore(client)
