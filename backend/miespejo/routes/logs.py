"""
MiEspejo Backend - Habit Log Route Handlers
============================================

What:  Counter events and timed sessions.

Session lifecycle as seen by the client:
    POST /logs/session/start {userId, habitTypeId}          → 201 {logId}
    PUT  /logs/session/end   {logId, durationSeconds, notas} → 200 {message}

Both calls are independent requests; the logId is the only state carried
between them.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from miespejo.dependencies import get_habit_service
from miespejo.schemas.habit import (
    EndSessionRequest,
    ErrorResponse,
    HabitLogRequest,
    MessageResponse,
    SessionStartResponse,
)
from miespejo.services.habit_service import HabitService

router = APIRouter(prefix="/logs", tags=["Logs"])

_ERRORS = {
    400: {"description": "Missing required field", "model": ErrorResponse},
    500: {"description": "Store error", "model": ErrorResponse},
}


@router.post(
    "/event",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Record a counter event",
)
async def log_event(
    payload: Optional[HabitLogRequest] = None,
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    message = await service.log_event(payload or HabitLogRequest())
    return MessageResponse(message=message)


@router.post(
    "/session/start",
    response_model=SessionStartResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Start a timed session",
)
async def start_session(
    payload: Optional[HabitLogRequest] = None,
    service: HabitService = Depends(get_habit_service),
) -> SessionStartResponse:
    log_id = await service.start_session(payload or HabitLogRequest())
    return SessionStartResponse(log_id=log_id)


@router.put(
    "/session/end",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="End a timed session",
    description="durationSeconds may be 0; only a body without it is rejected.",
)
async def end_session(
    payload: Optional[EndSessionRequest] = None,
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    message = await service.end_session(payload or EndSessionRequest())
    return MessageResponse(message=message)
