"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (request context, body limit, security headers, CORS)
  - Mount role routers under the /api prefix
  - Seed the bootstrap administrator on startup
  - Expose health check and metrics endpoints

Collaborators:
  - api.*_routes: donor, volunteer, elder home and admin endpoints
  - infrastructure.db.pool: PostgreSQL connection pool lifecycle
  - application.seed_admin: bootstrap administrator
  - exception_handlers: RFC 7807 error mapping

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - APP_ENV=test skips the pool (in-memory stores are used instead)

Notes:
  - Middleware order (last added runs first): RequestContext, then CORS,
    then SecurityHeaders, then BodyLimit
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .api import admin_router, donor_router, operator_router, volunteer_router
from .application.seed_admin import ensure_bootstrap_admin
from .config import get_settings
from .container import get_identity_repositories
from .error_responses import OPENAPI_ERROR_RESPONSES
from .exception_handlers import register_exception_handlers
from .guards import require_metrics_access
from .infrastructure.db.pool import close_pool, init_pool
from .logger import logger
from .middleware import BodyLimitMiddleware, RequestContextMiddleware
from .security import SecurityHeadersMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    # R: Raises ValidationError if env vars are missing/invalid
    settings = get_settings()

    if settings.uses_insecure_jwt_secret():
        logger.warning(
            "Signing tokens with the insecure development secret",
            extra={"app_env": settings.app_env},
        )

    if not settings.is_test():
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    ensure_bootstrap_admin(settings, get_identity_repositories().admins)

    logger.info(
        "CareLink API starting up",
        extra={
            "app_env": settings.app_env,
            "storage": "s3" if settings.s3_bucket else "local",
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
        },
    )
    yield

    if not settings.is_test():
        close_pool()
    logger.info("CareLink API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="CareLink API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "donors", "description": "Donor accounts"},
            {"name": "volunteers", "description": "Volunteer accounts and feedback"},
            {"name": "elder-homes", "description": "Elder home applications and listings"},
            {"name": "admin", "description": "Moderation (requires admin token)"},
        ],
    )

    app.add_middleware(BodyLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )
    app.add_middleware(RequestContextMiddleware)

    for router in (donor_router, volunteer_router, operator_router, admin_router):
        app.include_router(router, prefix="/api", responses=OPENAPI_ERROR_RESPONSES)

    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        """
        R: Health check that verifies the credential store.

        Returns:
            ok: True if the database answers
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = "disconnected"
        if get_identity_repositories().admins.ping():
            db_status = "connected"
        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics")
    def metrics(_auth: None = Depends(require_metrics_access())):
        """R: Expose Prometheus metrics."""
        from .metrics import get_metrics_response, is_prometheus_available

        if not is_prometheus_available():
            return Response(
                content="# prometheus_client not installed\n",
                media_type="text/plain",
            )

        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
