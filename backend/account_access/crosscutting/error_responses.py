"""
Name: Standard Error Responses (RFC 7807 / Problem Details)

Responsibilities:
  - Define the stable error code catalog (ErrorCode)
  - Build RFC 7807 payloads (ErrorDetail)
  - Provide factories for common errors
  - Provide the FastAPI handler that renders application/problem+json

Collaborators:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (maps internal errors)
  - interfaces/api/http/error_mapping.py (maps use case results)
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNAUTHORIZED = "UNAUTHORIZED"
    ACCESS_DENIED = "ACCESS_DENIED"
    FIELD_FORBIDDEN = "FIELD_FORBIDDEN"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    NICKNAME_TAKEN = "NICKNAME_TAKEN"
    IDENTITY_INACTIVE = "IDENTITY_INACTIVE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorDetail(BaseModel):
    """
    RFC 7807 model (Problem Details).

    Extra fields:
    - code: stable error code for clients
    - errors: optional detail list (e.g. [{"field": "x", "msg": "..."}])
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_OPENAPI_ERROR_CONTENT = {
    PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}


def _openapi_entry(description: str) -> dict[str, Any]:
    return {
        "description": f"{description} (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    }


OPENAPI_ERROR_RESPONSES = {
    "401": _openapi_entry("Unauthorized"),
    "403": _openapi_entry("Access denied or field forbidden"),
    "404": _openapi_entry("Profile not found"),
    "409": _openapi_entry("Nickname taken"),
    "422": _openapi_entry("Validation error"),
    "default": _openapi_entry("Error"),
}


class AppHTTPException(HTTPException):
    """HTTPException carrying a stable ErrorCode and optional detail list."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Error factories
# ---------------------------------------------------------------------------
def validation_failed(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_FAILED, detail, errors)


def unauthorized(detail: str = "Authentication required") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def access_denied(detail: str = "Access denied") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.ACCESS_DENIED, detail)


def field_forbidden(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FIELD_FORBIDDEN, detail, errors)


def profile_not_found(detail: str = "Profile not found") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.PROFILE_NOT_FOUND, detail)


def nickname_taken(detail: str = "Nickname already in use") -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.NICKNAME_TAKEN, detail)


def identity_inactive(detail: str = "Identity is deactivated") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.IDENTITY_INACTIVE, detail)


# ---------------------------------------------------------------------------
# FastAPI handlers
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Render AppHTTPException as problem+json, adding instance and request_id."""
    request_id = getattr(getattr(request, "state", None), "request_id", None)

    errors = exc.errors or []
    if request_id:
        errors = [*errors, {"request_id": request_id}]

    error = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
