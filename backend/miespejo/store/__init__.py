# Store package init
"""
MiEspejo Backend - Row Store Package
====================================

What:  Persistence collaborator used by the services layer.

    - RowStore (abstract): select / insert / update over named tables
    - SupabaseRowStore: implementation backed by the async Supabase client
"""

from miespejo.store.base import OrderBy, RowStore
from miespejo.store.supabase_store import SupabaseRowStore, create_supabase_store

__all__ = ["OrderBy", "RowStore", "SupabaseRowStore", "create_supabase_store"]
