"""
MiEspejo Backend - Application Package
======================================

What: HTTP API used by the MiEspejo mobile app to record habit events and
      timed sessions in Supabase.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (validation, shaping)  │  ← HabitService
    ├─────────────────────────────────────┤
    │        Schemas (API contracts)      │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │          Store (persistence)        │  ← RowStore / SupabaseRowStore
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
