"""
Name: Role Authentication Guards

Responsibilities:
  - FastAPI dependencies that require a bearer token for one role
  - Load the identity behind the token (without its password hash)
  - Refuse blocked accounts and, for operator capabilities, unapproved ones
  - Bind the authenticated identity to request state and log context

Collaborators:
  - tokens.verify_token
  - container.get_identity_repositories
  - domain.approval.access_denial_message
  - metrics.record_auth_failure

Constraints:
  - Exactly one credential store read per guarded request (no caching)
  - Verification failure subtypes are logged and counted, never returned
"""

from typing import Callable

from fastapi import Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from .container import IdentityRepositories, get_identity_repositories
from .context import bind_identity
from .domain.approval import access_denial_message
from .domain.entities import ElderHomeOperator, Identity, Role
from .error_responses import forbidden, unauthorized
from .logger import logger
from .metrics import record_auth_failure
from .tokens import TokenVerificationError, verify_token

NO_TOKEN_MESSAGE = "Not authorized, no token"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"
ACCOUNT_NOT_FOUND_MESSAGE = "Not authorized, account not found"
BLOCKED_MESSAGE = "Your account has been blocked. Please contact admin."


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def _reject(role: Role, reason: str) -> None:
    record_auth_failure(role.value, reason)
    logger.info("Auth failed", extra={"role": role.value, "reason": reason})


def require_identity(role: Role | str) -> Callable:
    """R: FastAPI dependency that requires a valid token for `role`."""
    required_role = Role(role)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        repositories: IdentityRepositories = Depends(get_identity_repositories),
    ) -> Identity:
        token = _extract_bearer_token(authorization)
        if not token:
            _reject(required_role, "no_token")
            raise unauthorized(NO_TOKEN_MESSAGE)

        try:
            claims = verify_token(token)
        except TokenVerificationError as exc:
            _reject(required_role, exc.reason)
            raise unauthorized(TOKEN_FAILED_MESSAGE) from exc

        if claims.role != required_role:
            _reject(required_role, "role_mismatch")
            raise unauthorized(TOKEN_FAILED_MESSAGE)

        repository = repositories.for_role(required_role)
        identity = await run_in_threadpool(
            repository.get_by_id, claims.subject_id, include_secret=False
        )
        if identity is None:
            _reject(required_role, "not_found")
            raise unauthorized(ACCOUNT_NOT_FOUND_MESSAGE)

        if identity.is_blocked:
            _reject(required_role, "blocked")
            raise forbidden(BLOCKED_MESSAGE)

        request.state.identity = identity
        bind_identity(str(identity.id), required_role.value)
        return identity

    return dependency


def require_approved_operator() -> Callable:
    """R: Operator guard plus the approval gate."""
    base_guard = require_identity(Role.OPERATOR)

    async def dependency(
        operator: ElderHomeOperator = Depends(base_guard),
    ) -> ElderHomeOperator:
        message = access_denial_message(operator)
        if message:
            _reject(Role.OPERATOR, f"approval_{operator.approval_status.value}")
            raise forbidden(message)
        return operator

    return dependency


def require_admin() -> Callable:
    return require_identity(Role.ADMIN)


def require_metrics_access() -> Callable:
    """R: Admin token required on /metrics only when METRICS_REQUIRE_AUTH=1."""
    admin_guard = require_admin()

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        repositories: IdentityRepositories = Depends(get_identity_repositories),
    ) -> None:
        from .config import get_settings

        if not get_settings().metrics_require_auth:
            return None
        await admin_guard(request, authorization, repositories)
        return None

    return dependency
