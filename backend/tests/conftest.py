"""
MiEspejo Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── memory_store: In-memory RowStore (no Supabase needed)
    ├── test_settings: Settings with fake Supabase credentials
    ├── fixed_clock: Deterministic timestamp source for HabitService
    └── test_client: HTTPX AsyncClient bound to an app using memory_store
"""

import os
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep test output quiet and independent from a developer's real credentials
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_SERVICE_ROLE_KEY", None)

from miespejo.config import Settings  # noqa: E402
from miespejo.exceptions import StoreError  # noqa: E402
from miespejo.store.base import OrderBy, RowStore  # noqa: E402

FIXED_NOW = "2024-05-01T08:30:00+00:00"


class InMemoryRowStore(RowStore):
    """
    RowStore keeping rows in dicts, with auto-incrementing integer ids.

    Every call is appended to `calls` as (method, table) so tests can assert
    that a rejected request never reached the store. Setting `fail_with`
    makes every subsequent call raise StoreError with that message.
    """

    def __init__(self, first_id: int = 1):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.calls: List[tuple] = []
        self.fail_with: Optional[str] = None
        self.closed = False
        self._next_id = first_id

    def _enter(self, method: str, table: str) -> None:
        self.calls.append((method, table))
        if self.fail_with is not None:
            raise StoreError(message=self.fail_with, table=table)

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: Optional[OrderBy] = None,
    ) -> List[Dict[str, Any]]:
        self._enter("select", table)
        rows = [
            dict(row)
            for row in self.tables[table]
            if all(row.get(column) == value for column, value in filters.items())
        ]
        if order is not None:
            rows.sort(key=lambda row: row.get(order.column), reverse=not order.ascending)
        return rows

    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self._enter("insert", table)
        stored = {"id": self._next_id, **row}
        self._next_id += 1
        self.tables[table].append(stored)
        return dict(stored)

    async def update(self, table: str, row_id: Any, patch: Mapping[str, Any]) -> None:
        self._enter("update", table)
        for row in self.tables[table]:
            if row["id"] == row_id:
                row.update(patch)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_store():
    return InMemoryRowStore()


@pytest.fixture
def test_settings():
    return Settings(
        supabase_url="https://test-project.supabase.co",
        supabase_service_role_key="test-service-role-key",
        log_level="WARNING",
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def test_client(test_settings, memory_store):
    """
    HTTPX AsyncClient talking to a fresh app instance backed by memory_store.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from miespejo.main import create_app

    app = create_app(test_settings, store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
