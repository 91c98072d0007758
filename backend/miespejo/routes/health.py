"""
MiEspejo Backend - Liveness Routes
===================================

What:  GET / (plain-text liveness message used by the hosting platform) and
       GET /health (JSON status for monitoring).
How:   Neither touches Supabase: they answer as long as the process serves requests.
"""

import time

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from miespejo import __version__
from miespejo.schemas.habit import HealthResponse

router = APIRouter(tags=["Health"])

LIVENESS_MESSAGE = "MiEspejo Backend is Active and connected! 🪞"

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness message")
async def root() -> str:
    return LIVENESS_MESSAGE


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
