"""
MiEspejo Backend - FastAPI Dependencies
========================================

What:  Gives route handlers the HabitService built for this application instance.
How:   The service lives on app.state; create_app() sets it when a store is
       injected (tests), the lifespan handler sets it otherwise.
"""

from fastapi import Request

from miespejo.services.habit_service import HabitService


def get_habit_service(request: Request) -> HabitService:
    """FastAPI dependency returning the application's HabitService."""
    return request.app.state.habit_service
