# Middleware package init
"""
MiEspejo Backend - Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

The request ID is set first so the access log line can carry it.
"""
