"""
Error taxonomy and the handlers that turn it into JSON responses
"""

import uuid
import traceback
import logging
from typing import Optional
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "We encountered a problem. Retry in a few"

# MySQL ER_DUP_ENTRY
MYSQL_DUPLICATE_ENTRY = 1062


class ClinicAPIError(Exception):
    """Base class for errors that map onto a client-facing status code"""
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ClinicAPIError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthError(ClinicAPIError):
    """No credential (403) or an invalid one (401)"""
    status_code = 401
    error_code = "AUTH_ERROR"


class NotFoundError(ClinicAPIError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ClinicAPIError):
    status_code = 409
    error_code = "CONFLICT"


class InternalError(ClinicAPIError):
    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)


class DatabaseError(ClinicAPIError):
    """Custom exception for database-related errors"""
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)


def is_unique_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError came from a unique constraint"""
    orig = getattr(error, "orig", None)
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    if getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(error)
    return "UNIQUE constraint failed" in text or "Duplicate entry" in text


def _error_body(message: str, code: str) -> dict:
    return {"message": message, "code": code}


async def clinic_error_handler(request: Request, exc: ClinicAPIError) -> JSONResponse:
    message = exc.message
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    if isinstance(exc, DatabaseError):
        # Internal detail stays in the log
        message = GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=exc.status_code, content=_error_body(message, exc.error_code))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})

    content = _error_body("Missing or invalid fields", ValidationError.error_code)
    content["errors"] = errors
    return JSONResponse(status_code=400, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), f"HTTP_{exc.status_code}"),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log with an error id, return a generic 500"""
    error_id = str(uuid.uuid4())

    logger.error(
        f"Unhandled exception {error_id}: {type(exc).__name__} in {request.method} {request.url.path}",
        extra={
            "error_id": error_id,
            "endpoint": str(request.url.path),
            "method": request.method,
            "error_type": type(exc).__name__,
            "stack_trace": traceback.format_exc(),
        },
        exc_info=True,
    )

    content = _error_body(GENERIC_ERROR_MESSAGE, "INTERNAL_ERROR")
    content["error_id"] = error_id
    content["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicAPIError, clinic_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
