"""
Global error handling middleware for the FastAPI application.

Catches CommItError subclasses, Pydantic validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope:
``{"error": <message>, "type": <kind>, "timestamp": ...}`` plus
kind-specific fields (``missingFields``, ``details``).
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import CommItError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``CommItError`` — maps domain errors to structured JSON responses.
    2. ``RequestValidationError`` — Pydantic validation failures (422).
    3. ``Exception`` — catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(CommItError)
    async def commit_error_handler(_request: Request, exc: CommItError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "type": exc.code,
                "timestamp": exc.timestamp,
                **exc.extra(),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic request validation errors (malformed body/params)."""
        return JSONResponse(
            status_code=422,
            content={
                "error": "Request validation failed",
                "type": "VALIDATION_ERROR",
                "details": [
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in exc.errors()
                ],
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler — prevents stack traces from leaking to clients."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "type": "SERVER_ERROR",
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )
