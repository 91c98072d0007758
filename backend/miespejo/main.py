"""
MiEspejo Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       the lifespan handler validates configuration and connects Supabase.
Who:   uvicorn (`uvicorn miespejo.main:app`) or the `miespejo` entry point.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS (*)    │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────┐ ┌────────────────┐ ┌──────────────┐  │
    │  │ /habits   │ │ /logs/...      │ │ / , /health  │  │
    │  └───────────┘ └────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ValidationError→400 │ OperationError→500     │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Startup:
    1. Configure logging
    2. Validate SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (missing → abort)
    3. Connect the Supabase client unless a store was injected
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from miespejo import __version__
from miespejo.config import Settings, settings as default_settings
from miespejo.exceptions import (
    ConfigurationError,
    MiEspejoError,
    OperationError,
    ValidationError,
)
from miespejo.middleware.logging import RequestLoggingMiddleware
from miespejo.middleware.request_id import RequestIDMiddleware, request_id_var
from miespejo.routes import habits, health, logs
from miespejo.services.habit_service import HabitService
from miespejo.store.base import RowStore
from miespejo.store.supabase_store import create_supabase_store

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor."
INVALID_BODY_PREFIX = "Cuerpo de la petición inválido"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, written to stdout
    so the hosting platform captures it.
    """
    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request lines come from RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: validate configuration, connect the store, build HabitService.
    Shutdown: release the store.

    A ConfigurationError propagates out of startup, so uvicorn aborts
    instead of serving requests without a database.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings)
    logger.info("MiEspejo Backend starting up...")

    try:
        app_settings.validate_required()
    except ConfigurationError as e:
        logger.critical("Configuration error: %s", e.message)
        logger.critical("Set the missing variables in the deployment environment and restart.")
        raise

    store: Optional[RowStore] = getattr(app.state, "store", None)
    if store is None:
        store = await create_supabase_store(app_settings)
        app.state.store = store
        app.state.habit_service = HabitService(store)

    logger.info("Server listening on port %d", app_settings.port)

    yield

    logger.info("MiEspejo Backend shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to {"error": "<message>"} responses.

    Handler hierarchy:
        ValidationError         → 400 (missing field, checked before any store call)
        RequestValidationError  → 400 (body is not valid JSON or has wrong types)
        OperationError          → 500 (store failure, message includes the store's text)
        MiEspejoError (base)    → 500
        Exception (fallback)    → 500, generic message, traceback logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        details = "; ".join(
            "{}: {}".format(".".join(str(part) for part in err.get("loc", ())), err.get("msg", ""))
            for err in exc.errors()
        )
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), details)
        return _error_response(400, f"{INVALID_BODY_PREFIX}: {details}")

    @app.exception_handler(OperationError)
    async def handle_operation_error(request: Request, exc: OperationError):
        logger.error(
            "[%s] Operation failed: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(MiEspejoError)
    async def handle_app_error(request: Request, exc: MiEspejoError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, INTERNAL_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[RowStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration value; defaults to the environment-loaded settings.
        store: Row store to use. When omitted, the lifespan handler connects
               Supabase with app_settings.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="MiEspejo API",
        description="Habit tracking backend for the MiEspejo mobile app, backed by Supabase.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store
    if store is not None:
        app.state.habit_service = HabitService(store)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    origins = app_settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(habits.router)
    app.include_router(logs.router)

    return app


def run(app_settings: Optional[Settings] = None) -> None:
    """
    Console entry point: validate configuration, then serve with uvicorn.

    Exits with status 1 without starting the server when the Supabase
    settings are missing.
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings)

    try:
        app_settings.validate_required()
    except ConfigurationError as e:
        logger.critical("Error: %s", e.message)
        logger.critical("Configure SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY before starting.")
        sys.exit(1)

    uvicorn.run(
        create_app(app_settings),
        host=app_settings.host,
        port=app_settings.port,
        log_config=None,
    )


app = create_app()


if __name__ == "__main__":
    run()
