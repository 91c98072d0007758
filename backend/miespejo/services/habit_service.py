"""
MiEspejo Backend - Habit Service (Validation and Response Shaping)
===================================================================

What:  The five habit-tracking operations behind the HTTP routes.
How:   Each operation validates its required fields, issues at most one call
       to the RowStore, and returns the value the route serializes.
Who:   Called by routes/habits.py and routes/logs.py.

Operation flow:
    ┌──────────┐    ┌────────────┐    ┌───────────┐    ┌──────────┐
    │  Route   │───▶│  Validate  │───▶│ RowStore  │───▶│  Result  │
    └──────────┘    └────────────┘    └───────────┘    └──────────┘
                          │ missing field     │ StoreError
                          ▼                   ▼
                    ValidationError     OperationError
                        (400)               (500)

A HabitLog goes through two states, open (inserted by start_session) and
closed (updated by end_session). The service keeps no record of open
sessions; the log id returned to the client is the only link between them.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from miespejo.exceptions import OperationError, StoreError, ValidationError
from miespejo.schemas.habit import (
    CreateHabitTypeRequest,
    EndSessionRequest,
    HabitLogRequest,
    Identifier,
)
from miespejo.store.base import OrderBy, RowStore

logger = logging.getLogger(__name__)

HABIT_TYPES_TABLE = "habit_types"
HABIT_LOGS_TABLE = "habit_logs"

# ── Client-facing messages ────────────────────────────────────────────────
MISSING_USER_ID_PARAM = "Falta el parámetro userId en la URL."
MISSING_HABIT_TYPE_FIELDS = "Faltan userId, nombre o tipoRegistro en el cuerpo de la petición."
MISSING_LOG_FIELDS = "Faltan userId o habitTypeId en el cuerpo de la petición."
MISSING_END_SESSION_FIELDS = "Faltan logId o durationSeconds en el cuerpo de la petición."

LIST_HABITS_FAILED = "Error al obtener hábitos"
CREATE_HABIT_FAILED = "Error al crear hábito"
LOG_EVENT_FAILED = "Error al registrar evento"
START_SESSION_FAILED = "Error al iniciar sesión"
END_SESSION_FAILED = "Error al finalizar sesión"

HABIT_CREATED = "Hábito creado correctamente"
EVENT_LOGGED = "Evento registrado"
SESSION_ENDED = "Sesión finalizada correctamente"


def utc_now() -> str:
    """Current server time as a timezone-aware ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _missing(fields: Mapping[str, Any]) -> List[str]:
    # Absent, null, "", 0 and False all count as missing
    return [name for name, value in fields.items() if not value]


class HabitService:
    """
    Business logic for habit types and habit logs.

    Args:
        store: Row store collaborator
        clock: Returns the timestamp written to fecha_inicio / fecha_fin / created_at
    """

    def __init__(self, store: RowStore, clock: Callable[[], str] = utc_now):
        self.store = store
        self.clock = clock

    # ── Habit types ───────────────────────────────────────────────────────

    async def list_habit_types(self, user_id: Optional[Identifier]) -> List[Dict[str, Any]]:
        """
        Active habit types of a user, oldest first.

        Raises:
            ValidationError: user_id is empty
            OperationError:  the store query failed
        """
        if not user_id:
            raise self._invalid(MISSING_USER_ID_PARAM, ["userId"])

        try:
            return await self.store.select(
                HABIT_TYPES_TABLE,
                {"user_id": user_id, "is_active": True},
                order=OrderBy("created_at", ascending=True),
            )
        except StoreError as e:
            raise self._failed(LIST_HABITS_FAILED, e)

    async def create_habit_type(self, payload: CreateHabitTypeRequest) -> str:
        """Insert a new active habit type; returns the confirmation message."""
        missing = _missing({
            "userId": payload.user_id,
            "nombre": payload.nombre,
            "tipoRegistro": payload.tipo_registro,
        })
        if missing:
            raise self._invalid(MISSING_HABIT_TYPE_FIELDS, missing)

        row = {
            "user_id": payload.user_id,
            "nombre": payload.nombre,
            "tipo_registro": payload.tipo_registro,
            "meta_diaria": payload.meta_diaria,
            "is_active": True,
            "created_at": self.clock(),
        }
        try:
            await self.store.insert(HABIT_TYPES_TABLE, row)
        except StoreError as e:
            raise self._failed(CREATE_HABIT_FAILED, e)

        logger.info("Habit type '%s' created for user %s", payload.nombre, payload.user_id)
        return HABIT_CREATED

    # ── Habit logs ────────────────────────────────────────────────────────

    async def log_event(self, payload: HabitLogRequest) -> str:
        """Record a single counter event (a HabitLog with no end fields)."""
        self._require_log_fields(payload)

        try:
            await self.store.insert(HABIT_LOGS_TABLE, self._new_log(payload))
        except StoreError as e:
            raise self._failed(LOG_EVENT_FAILED, e)

        return EVENT_LOGGED

    async def start_session(self, payload: HabitLogRequest) -> Identifier:
        """
        Open a timed session.

        Returns:
            The id of the inserted HabitLog; the client sends it back to end_session.
        """
        self._require_log_fields(payload)

        try:
            inserted = await self.store.insert(HABIT_LOGS_TABLE, self._new_log(payload))
        except StoreError as e:
            raise self._failed(START_SESSION_FAILED, e)

        if not inserted or inserted.get("id") is None:
            logger.error("Session start insert for user %s returned no id", payload.user_id)
            raise OperationError(
                START_SESSION_FAILED,
                "el registro insertado no devolvió un id",
                context={"table": HABIT_LOGS_TABLE},
            )

        logger.info("Session %s started for user %s", inserted["id"], payload.user_id)
        return inserted["id"]

    async def end_session(self, payload: EndSessionRequest) -> str:
        """
        Close a timed session: sets fecha_fin, duracion_segundos and notas.

        durationSeconds = 0 is valid; only a request without the key is rejected.
        notas is written only when the client sent it.
        """
        missing = _missing({"logId": payload.log_id})
        if not payload.has_duration:
            missing.append("durationSeconds")
        if missing:
            raise self._invalid(MISSING_END_SESSION_FIELDS, missing)

        patch: Dict[str, Any] = {
            "fecha_fin": self.clock(),
            "duracion_segundos": payload.duration_seconds,
        }
        if payload.has_notas:
            patch["notas"] = payload.notas

        try:
            await self.store.update(HABIT_LOGS_TABLE, payload.log_id, patch)
        except StoreError as e:
            raise self._failed(END_SESSION_FAILED, e)

        logger.info("Session %s ended after %ss", payload.log_id, payload.duration_seconds)
        return SESSION_ENDED

    # ── Helpers ───────────────────────────────────────────────────────────

    def _require_log_fields(self, payload: HabitLogRequest) -> None:
        missing = _missing({"userId": payload.user_id, "habitTypeId": payload.habit_type_id})
        if missing:
            raise self._invalid(MISSING_LOG_FIELDS, missing)

    def _new_log(self, payload: HabitLogRequest) -> Dict[str, Any]:
        return {
            "user_id": payload.user_id,
            "habit_type_id": payload.habit_type_id,
            "fecha_inicio": self.clock(),
        }

    @staticmethod
    def _invalid(message: str, fields: List[str]) -> ValidationError:
        logger.warning("Rejected request, missing %s", ", ".join(fields))
        return ValidationError(message=message, fields=fields)

    @staticmethod
    def _failed(operation: str, error: StoreError) -> OperationError:
        logger.error("%s: %s | Context: %s", operation, error.message, error.context)
        return OperationError(operation, error.message, context=dict(error.context))
