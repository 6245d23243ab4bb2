"""
task_tracker.api.errors

Boundary translation from exceptions to structured JSON responses.

Responsibilities:
- Map domain errors (`task_tracker.errors`) to HTTP status codes.
- Render request-schema failures as 400 with a per-field map.
- Turn anything unexpected into an opaque 500 (logged with traceback).

Every error body has the shape `{"timestamp", "status", "error"}`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from task_tracker.errors import (
    AuthenticationFailed,
    Conflict,
    InvalidInput,
    NotFound,
    PermissionDenied,
    TaskTrackerError,
)
from task_tracker.observability.logging import get_logger

log = get_logger(__name__)

_STATUS_BY_ERROR: dict[type[TaskTrackerError], int] = {
    AuthenticationFailed: HTTP_401_UNAUTHORIZED,
    PermissionDenied: HTTP_403_FORBIDDEN,
    InvalidInput: HTTP_400_BAD_REQUEST,
    NotFound: HTTP_404_NOT_FOUND,
    Conflict: HTTP_409_CONFLICT,
}


def error_body(status: int, error: str, **extra: Any) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "status": status,
        "error": error,
        **extra,
    }


def status_for(exc: TaskTrackerError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return HTTP_500_INTERNAL_SERVER_ERROR


async def _domain_error(_: Request, exc: TaskTrackerError) -> JSONResponse:
    status = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == HTTP_401_UNAUTHORIZED else None
    extra = {"field": exc.field} if isinstance(exc, InvalidInput) and exc.field else {}
    log.info("request.rejected", status_code=status, error=exc.message)
    return JSONResponse(
        error_body(status, exc.message, **extra), status_code=status, headers=headers
    )


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    fields: dict[str, str] = {}
    for err in exc.errors():
        # Drop the location prefix ("body"/"query"/"path") so clients see plain field names.
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        fields.setdefault(".".join(loc) or "request", err.get("msg", "invalid"))
    return JSONResponse(
        error_body(HTTP_400_BAD_REQUEST, "Validation failed", fields=fields),
        status_code=HTTP_400_BAD_REQUEST,
    )


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        error_body(exc.status_code, str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    log.error("request.failed", exc_info=exc)
    return JSONResponse(
        error_body(HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskTrackerError, _domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unexpected_error)


# --- Module Notes -----------------------------------------------------------
# A 403 body carries the guard's reason only; it never echoes ids or owner details.
