"""
Domain errors and global exception handlers.

Services raise the ``HRMSError`` family; the handlers below translate them
(and database / unexpected failures) into JSON without leaking stack traces.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class HRMSError(Exception):
    """Base class for business rule violations."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "success": False}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(HRMSError):
    """Malformed input or a missing required field."""


class FormatError(ValidationError):
    """A time value is not a zero-padded 24-hour ``HH:MM`` string."""


class NotFoundError(HRMSError):
    """A referenced employee, shift or time entry does not exist."""

    status_code = 404


class ConflictError(HRMSError):
    """Overlapping shifts, or an employee already has an active time entry.

    ``conflicts`` holds plain dicts describing the clashing records so the
    caller can tell exactly which ones are in the way.
    """

    status_code = 409

    def __init__(
        self,
        message: str,
        conflicts: list[dict[str, Any]] | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, errors)
        self.conflicts = conflicts or []

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["conflicts"] = self.conflicts
        return body


class StateError(HRMSError):
    """The requested transition is invalid for the record's current status."""


# ── Handlers ────────────────────────────────────────────────────────
async def _domain_error_handler(_request: Request, exc: HRMSError) -> JSONResponse:
    logger.info("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HRMSError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
