"""
Name: Bearer Tokens (JWT)

Responsibilities:
  - Issue signed HS256 tokens carrying the identity id and its role
  - Verify signature, expiry and required claims
  - Classify verification failures (expired, bad signature, malformed)

Collaborators:
  - config.Settings: signing secret and TTL
  - guards.py: verifies tokens on protected routes
  - application use cases: issue tokens after registration/login/update

Constraints:
  - Tokens carry no secrets and are not revocable before expiry
  - A token whose role does not match the guarded namespace is rejected
    by the guard, not here
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from .config import get_settings
from .domain.entities import Role

JWT_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


class TokenVerificationError(Exception):
    """Base error for a token that cannot be trusted."""

    reason: str = "invalid"


class TokenExpiredError(TokenVerificationError):
    reason = "expired"


class TokenSignatureError(TokenVerificationError):
    reason = "bad_signature"


class MalformedTokenError(TokenVerificationError):
    reason = "malformed"


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    ttl_days: int


@dataclass(frozen=True)
class TokenClaims:
    subject_id: UUID
    role: Role
    issued_at: datetime
    expires_at: datetime


def get_token_settings() -> TokenSettings:
    settings = get_settings()
    return TokenSettings(
        secret=settings.resolved_jwt_secret(),
        ttl_days=settings.jwt_ttl_days,
    )


def issue_token(
    subject_id: UUID,
    role: Role,
    settings: TokenSettings | None = None,
    now: datetime | None = None,
) -> str:
    """R: Create a signed token for an identity."""
    token_settings = settings or get_token_settings()
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(subject_id),
        "role": Role(role).value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(days=token_settings.ttl_days)).timestamp()),
    }
    return jwt.encode(payload, token_settings.secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, settings: TokenSettings | None = None) -> TokenClaims:
    """
    R: Decode and validate a token.

    Raises:
        TokenExpiredError: exp is in the past
        TokenSignatureError: signed with another secret
        MalformedTokenError: undecodable, missing claims or unknown role
    """
    token_settings = settings or get_token_settings()
    try:
        payload = jwt.decode(
            token,
            token_settings.secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except jwt.InvalidSignatureError as exc:
        raise TokenSignatureError("Token signature mismatch") from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedTokenError("Token malformed") from exc

    try:
        subject_id = UUID(str(payload["sub"]))
        role = Role(payload["role"])
    except ValueError as exc:
        raise MalformedTokenError("Token claims invalid") from exc

    return TokenClaims(
        subject_id=subject_id,
        role=role,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
