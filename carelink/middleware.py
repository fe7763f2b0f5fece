"""
Name: HTTP Middleware

Responsibilities:
  - Generate and propagate request_id (UUID)
  - Set request context for logging
  - Add X-Request-Id response header
  - Record request metrics (latency, count)
  - Reject oversized request bodies before multipart parsing

Collaborators:
  - context.py: ContextVars for request-scoped data
  - metrics.py: Prometheus counters and histograms
  - logger.py: Structured logging

Constraints:
  - RequestContextMiddleware must be outermost (before CORS, guards, etc.)
  - Must clear context after response
"""

import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    request_id_var,
    http_method_var,
    http_path_var,
    clear_context,
)
from .error_responses import app_exception_handler, payload_too_large
from .logger import logger
from .metrics import record_request_metrics


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    R: Middleware that establishes request context and records metrics.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        # R: Honour an upstream id when present so proxies can correlate
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)

        request.state.request_id = request_id

        start_time = time.perf_counter()

        try:
            response = await call_next(request)

            latency_seconds = time.perf_counter() - start_time

            response.headers["X-Request-Id"] = request_id

            logger.info(
                "request completed",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": round(latency_seconds * 1000, 2),
                },
            )

            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=response.status_code,
                latency_seconds=latency_seconds,
            )

            return response

        except Exception as exc:
            latency_seconds = time.perf_counter() - start_time
            logger.exception(
                "request failed",
                extra={
                    "latency_ms": round(latency_seconds * 1000, 2),
                    "error": str(exc),
                },
            )
            raise

        finally:
            clear_context()


class BodyLimitMiddleware(BaseHTTPMiddleware):
    """
    R: Middleware that enforces request body size limits.

    Returns 413 Payload Too Large if Content-Length exceeds MAX_BODY_BYTES.
    Per-file limits are enforced later by upload ingestion.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        from .config import get_settings

        max_bytes = get_settings().max_body_bytes
        content_length = request.headers.get("content-length")

        if content_length:
            try:
                declared = int(content_length)
            except ValueError:
                declared = None  # Invalid content-length, let the server reject it
            if declared is not None and declared > max_bytes:
                logger.warning(
                    "Request body too large",
                    extra={
                        "content_length": content_length,
                        "max_bytes": max_bytes,
                        "path": request.url.path,
                    },
                )
                return await app_exception_handler(request, payload_too_large(max_bytes))

        return await call_next(request)
