"""
MiEspejo Backend - Pydantic Request/Response Schemas
=====================================================

What:  The API contract with the mobile client.
How:   Request bodies use the client's camelCase keys through aliases.

Required-field checks are NOT expressed here: every request field is optional
at the schema level so that a missing field reaches HabitService, which
rejects it with a Spanish 400 message instead of FastAPI's generic 422.
Presence of optional keys (notas, durationSeconds) is read from
`model_fields_set`.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Identifiers are UUID strings or bigint ids depending on the table
Identifier = Union[int, str]


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateHabitTypeRequest(_RequestModel):
    """Body of POST /habits."""

    user_id: Optional[Identifier] = Field(default=None, alias="userId")
    nombre: Optional[str] = Field(default=None, description="Display name, e.g. 'Lectura'")
    tipo_registro: Optional[str] = Field(
        default=None,
        alias="tipoRegistro",
        description="Record kind: counter or timed session",
    )
    meta_diaria: Optional[int] = Field(default=None, alias="metaDiaria")


class HabitLogRequest(_RequestModel):
    """Body of POST /logs/event and POST /logs/session/start."""

    user_id: Optional[Identifier] = Field(default=None, alias="userId")
    habit_type_id: Optional[Identifier] = Field(default=None, alias="habitTypeId")


class EndSessionRequest(_RequestModel):
    """
    Body of PUT /logs/session/end.

    duration_seconds may legitimately be 0; only an absent key is an error.
    """

    log_id: Optional[Identifier] = Field(default=None, alias="logId")
    duration_seconds: Optional[int] = Field(default=None, alias="durationSeconds")
    notas: Optional[str] = None

    @property
    def has_duration(self) -> bool:
        return "duration_seconds" in self.model_fields_set

    @property
    def has_notas(self) -> bool:
        return "notas" in self.model_fields_set


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable confirmation")


class SessionStartResponse(BaseModel):
    """Returned by POST /logs/session/start; logId is passed back on session end."""

    model_config = ConfigDict(populate_by_name=True)

    log_id: Identifier = Field(alias="logId")


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {"error": "Error al registrar evento: permission denied for table habit_logs"}
    """

    error: str = Field(description="Operation description and underlying message")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' while the process serves requests")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
