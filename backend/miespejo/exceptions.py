"""
MiEspejo Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the failure modes of the API.
How:   Each exception carries a message and an optional context dict.
       Global handlers registered in main.py turn them into
       {"error": "<message>"} JSON bodies with the matching status code.

Exception Hierarchy:
    MiEspejoError (base)
    ├── ValidationError     → 400 Bad Request (missing or malformed field)
    ├── OperationError      → 500 Internal Server Error (store call failed)
    ├── StoreError          → raised by the row store, wrapped into OperationError
    └── ConfigurationError  → fatal at startup, never reaches a client

Messages are in Spanish: they are shown as-is by the mobile client.
"""

from typing import Any, Dict, List, Optional


class MiEspejoError(Exception):
    """
    Base exception for all MiEspejo application errors.

    Attributes:
        message:  Client-facing error description
        context:  Extra debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "Ocurrió un error inesperado.",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MiEspejoError):
    """
    Raised when a request is missing required fields.

    HTTP:  400 Bad Request
    When:  Always before any store call, so a rejected request has no side effects.
    """

    def __init__(
        self,
        message: str = "La petición no es válida.",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class StoreError(MiEspejoError):
    """
    Raised by a RowStore implementation when the underlying store rejects a call.

    The message is the store's own error text, untouched.
    """

    def __init__(
        self,
        message: str = "Error desconocido del almacenamiento.",
        table: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if table:
            ctx["table"] = table
        super().__init__(message=message, context=ctx)
        self.table = table


class OperationError(MiEspejoError):
    """
    Raised when an API operation fails because of the store.

    HTTP:  500 Internal Server Error
    Message format: "<operation description>: <store message>", e.g.
        "Error al obtener hábitos: permission denied for table habit_types"
    """

    def __init__(
        self,
        operation: str,
        detail: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["operation"] = operation
        super().__init__(message=f"{operation}: {detail}", context=ctx)
        self.operation = operation
        self.detail = detail


class ConfigurationError(MiEspejoError):
    """
    Raised when required environment configuration is absent.

    Never mapped to an HTTP response: the process refuses to start instead.
    """

    def __init__(
        self,
        message: str = "La configuración de la aplicación está incompleta.",
        missing: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if missing:
            ctx["missing"] = missing
        super().__init__(message=message, context=ctx)
        self.missing = missing or []
