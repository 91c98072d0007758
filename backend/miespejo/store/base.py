"""
MiEspejo Backend - Abstract Row Store Interface
================================================

What:  Abstract base class defining the contract for the persistence collaborator.
How:   Concrete stores inherit from RowStore and implement select/insert/update.
Who:   Called by HabitService; implemented by SupabaseRowStore and by the
       in-memory store used in the test suite.

The interface is intentionally narrow: equality filters, one optional sort
column, single-row insert and update-by-id. That is everything the API needs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class OrderBy:
    """Single-column sort specification for RowStore.select()."""

    column: str
    ascending: bool = True


class RowStore(ABC):
    """
    Abstract interface over a table-oriented row store.

    Contract:
        - All methods are coroutines; the caller awaits the store's response
        - Any failure reported by the store raises StoreError with the
          store's original message
        - Rows are plain dicts keyed by column name
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: Optional[OrderBy] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return every row of `table` whose columns equal all `filters` values.

        Args:
            table:   Table name
            filters: Column → expected value, combined with AND
            order:   Optional sort column and direction

        Raises:
            StoreError: The store rejected the query.
        """
        ...

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Insert one row and return it as stored (with generated columns such as
        `id`), or None when the store does not report the inserted row.

        Raises:
            StoreError: The store rejected the insert.
        """
        ...

    @abstractmethod
    async def update(self, table: str, row_id: Any, patch: Mapping[str, Any]) -> None:
        """
        Apply `patch` to the row whose `id` equals `row_id`.

        Raises:
            StoreError: The store rejected the update.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the store. No-op by default."""
        return None
