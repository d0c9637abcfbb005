"""
===============================================================================
CRC CARD: api/exception_handlers.py (centralized exception handling)
===============================================================================

Responsibilities:
  - Translate application exceptions into RFC 7807 responses.
  - Log errors with request_id + error_id.
  - Never leak internals for unhandled errors in production.

Collaborators:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: AccountAccessError, DatabaseError
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import AccountAccessError, DatabaseError
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: AccountAccessError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    request_id = _request_id_from(request)

    logger.error(
        "Service error",
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=exc.message if not get_settings().is_production() else "Service error.",
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.DATABASE_ERROR, status_code=503
    )


async def account_access_error_handler(
    request: Request, exc: AccountAccessError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Full stack trace in logs, generic body for the client."""
    logger.error(
        "Unhandled exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"request_id": _request_id_from(request)},
    )

    detail = str(exc) if not get_settings().is_production() else "Internal error."
    app_exc = AppHTTPException(
        status_code=500, code=ErrorCode.INTERNAL_ERROR, detail=detail
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """AppHTTPException first-class; generic Exception registered last as fallback."""
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(AccountAccessError, account_access_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
