"""
MiEspejo Backend - Habit Type Route Handlers
=============================================

What:  GET /habits/{user_id} (list) and POST /habits (create).
Who:   Called by the mobile app's habit picker and habit creation screen.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status

from miespejo.dependencies import get_habit_service
from miespejo.schemas.habit import CreateHabitTypeRequest, ErrorResponse, MessageResponse
from miespejo.services.habit_service import HabitService

router = APIRouter(prefix="/habits", tags=["Habits"])


@router.get(
    "/{user_id}",
    response_model=List[Dict[str, Any]],
    responses={
        400: {"description": "Missing userId", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="List a user's active habit types",
    description="Returns the active habit types of a user, ordered by creation time (oldest first).",
)
async def list_habit_types(
    user_id: str,
    service: HabitService = Depends(get_habit_service),
) -> List[Dict[str, Any]]:
    return await service.list_habit_types(user_id)


@router.get("", include_in_schema=False)
@router.get("/", include_in_schema=False)
async def list_habit_types_without_user(
    service: HabitService = Depends(get_habit_service),
) -> List[Dict[str, Any]]:
    """An empty userId segment is answered with the same 400 as a blank one."""
    return await service.list_habit_types(None)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing userId, nombre or tipoRegistro", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a habit type",
)
async def create_habit_type(
    payload: Optional[CreateHabitTypeRequest] = None,
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    message = await service.create_habit_type(payload or CreateHabitTypeRequest())
    return MessageResponse(message=message)
