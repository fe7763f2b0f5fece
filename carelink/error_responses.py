"""
Problem Details (RFC 7807) responses for every failure the API returns.

Bodies also carry `message`, identical to `detail`, which is the field the
CareLink web clients read. A few failures merge extra top-level fields into
the body (a rejected operator login adds approvalStatus, rejectionReason, id).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"
PROBLEM_TYPE_BASE = "https://api.carelink.local/errors/"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class ErrorDetail(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str
    message: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None
    stack: list[str] | None = None


def _documented(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "model": ErrorDetail,
        "content": {PROBLEM_JSON_MEDIA_TYPE: {}},
    }


# R: Attached to every router so the OpenAPI schema lists the problem bodies
OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: _documented("Validation error or duplicate username / email / home name"),
    401: _documented("Missing, invalid or foreign-role token"),
    403: _documented("Blocked account or elder home not approved"),
    404: _documented("Account or elder home not found"),
}


class AppHTTPException(HTTPException):
    """HTTPException with an error code and optional extra body fields."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors
        self.extra = extra


def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def conflict(detail: str) -> AppHTTPException:
    # R: Duplicates answer 400 with their own code, not 409
    return AppHTTPException(400, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str) -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str, extra: dict[str, Any] | None = None) -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail, extra=extra)


def not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def payload_too_large(max_bytes: int) -> AppHTTPException:
    return AppHTTPException(
        413,
        ErrorCode.PAYLOAD_TOO_LARGE,
        f"Request body too large. Maximum size: {max_bytes} bytes",
    )


def build_problem(
    request: Request,
    *,
    status: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
    stack: list[str] | None = None,
) -> ErrorDetail:
    return ErrorDetail(
        type=PROBLEM_TYPE_BASE + code.value.lower().replace("_", "-"),
        title=code.value.replace("_", " ").title(),
        status=status,
        detail=detail,
        message=detail,
        code=code,
        instance=request.url.path,
        errors=errors,
        stack=stack,
    )


def problem_response(
    problem: ErrorDetail,
    *,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content = problem.model_dump(mode="json", exclude_none=True)
    if extra:
        content.update(extra)
    return JSONResponse(
        status_code=problem.status,
        content=content,
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    problem = build_problem(
        request,
        status=exc.status_code,
        code=exc.code,
        detail=exc.detail,
        errors=exc.errors,
    )
    return problem_response(
        problem, extra=exc.extra, headers=getattr(exc, "headers", None)
    )
