"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert infrastructure exceptions to HTTP responses
  - Translate request-shape errors into the 400 validation taxonomy
  - Centralized logging of errors with correlation IDs

Collaborators:
  - main.py: Registers these handlers
  - exceptions.py: CarelinkError, DatabaseError, DuplicateIdentityError
  - infrastructure.storage.errors: StorageError
  - application.uploads: UploadRejectedError

Constraints:
  - All responses use RFC 7807 Problem Details format
  - Stack traces only leave the process when APP_ENV=development
"""

import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .exceptions import CarelinkError, DatabaseError, DuplicateIdentityError
from .error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    build_problem,
    problem_response,
)
from .application.uploads import UploadRejectedError
from .infrastructure.storage.errors import StorageError
from .logger import logger


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handle database errors with structured response."""
    logger.error(
        "Database error", extra={"error_id": exc.error_id, "error_message": exc.message}
    )
    app_exc = AppHTTPException(
        status_code=503,
        code=ErrorCode.DATABASE_ERROR,
        detail="Database operation failed",
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def duplicate_identity_handler(
    request: Request, exc: DuplicateIdentityError
) -> JSONResponse:
    """R: Last-resort mapping for a uniqueness race no use case absorbed."""
    logger.warning("Duplicate identity", extra={"field": exc.field})
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.CONFLICT,
        detail=exc.message,
    )
    return await app_exception_handler(request, app_exc)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Handle file storage errors."""
    logger.error(
        "Storage error", extra={"error_id": exc.error_id, "error_message": exc.message}
    )
    app_exc = AppHTTPException(
        status_code=503,
        code=ErrorCode.STORAGE_ERROR,
        detail="File storage is temporarily unavailable",
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def upload_rejected_handler(
    request: Request, exc: UploadRejectedError
) -> JSONResponse:
    """R: A file failed its field policy before anything was stored."""
    logger.info("Upload rejected", extra={"reason": exc.message})
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail=exc.message,
    )
    return await app_exception_handler(request, app_exc)


async def carelink_error_handler(request: Request, exc: CarelinkError) -> JSONResponse:
    """Handle generic application errors."""
    logger.error(
        "Application error",
        extra={"error_id": exc.error_id, "error_message": exc.message},
    )
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail="An unexpected error occurred",
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """R: Missing/mistyped fields are 400s like every other validation failure."""
    errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    first = errors[0] if errors else None
    detail = "Invalid request data"
    if first and first["loc"]:
        detail = f"Invalid request data: {first['loc'][-1]} {first['msg']}".strip()
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail=detail,
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unhandled exceptions."""
    logger.exception("Unhandled error", extra={"error_type": type(exc).__name__})
    stack = None
    if get_settings().is_development():
        stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    error = build_problem(
        request,
        status=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail="An unexpected error occurred",
        stack=stack,
    )
    return problem_response(error)


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers on the FastAPI app.

    Usage:
        from .exception_handlers import register_exception_handlers
        register_exception_handlers(app)
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(DuplicateIdentityError, duplicate_identity_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(UploadRejectedError, upload_rejected_handler)
    app.add_exception_handler(CarelinkError, carelink_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
