"""
Unit tests for carelink/tokens.py.

Tests:
  - Round trip of subject id and role
  - Expiry, foreign signature and malformed tokens are classified
  - Missing secret refuses to load settings
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from carelink.domain.entities import Role
from carelink.tokens import (
    JWT_ALGORITHM,
    MalformedTokenError,
    TokenExpiredError,
    TokenSettings,
    TokenSignatureError,
    issue_token,
    verify_token,
)

pytestmark = pytest.mark.unit

SETTINGS = TokenSettings(secret="token-test-secret", ttl_days=30)


def test_issue_and_verify_round_trip():
    subject = uuid4()
    now = datetime.now(timezone.utc).replace(microsecond=0)

    token = issue_token(subject, Role.VOLUNTEER, settings=SETTINGS, now=now)
    claims = verify_token(token, settings=SETTINGS)

    assert claims.subject_id == subject
    assert claims.role == Role.VOLUNTEER
    assert claims.issued_at == now
    assert claims.expires_at == now + timedelta(days=30)


def test_expired_token_is_rejected():
    issued = datetime.now(timezone.utc) - timedelta(days=31)
    token = issue_token(uuid4(), Role.DONOR, settings=SETTINGS, now=issued)

    with pytest.raises(TokenExpiredError) as exc_info:
        verify_token(token, settings=SETTINGS)
    assert exc_info.value.reason == "expired"


def test_token_signed_with_other_secret_is_rejected():
    other = TokenSettings(secret="another-secret", ttl_days=30)
    token = issue_token(uuid4(), Role.DONOR, settings=other)

    with pytest.raises(TokenSignatureError) as exc_info:
        verify_token(token, settings=SETTINGS)
    assert exc_info.value.reason == "bad_signature"


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_undecodable_token_is_malformed(token):
    with pytest.raises(MalformedTokenError):
        verify_token(token, settings=SETTINGS)


def test_token_without_role_claim_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": str(uuid4()), "iat": int(now.timestamp()), "exp": int((now + timedelta(days=1)).timestamp())},
        SETTINGS.secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(MalformedTokenError):
        verify_token(token, settings=SETTINGS)


def test_token_with_unknown_role_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": str(uuid4()),
            "role": "superuser",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(days=1)).timestamp()),
        },
        SETTINGS.secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(MalformedTokenError):
        verify_token(token, settings=SETTINGS)


def test_default_settings_come_from_environment(monkeypatch):
    from carelink.config import get_settings

    monkeypatch.setenv("JWT_SECRET", "env-secret")
    monkeypatch.setenv("JWT_TTL_DAYS", "2")
    get_settings.cache_clear()

    token = issue_token(uuid4(), Role.ADMIN)
    payload = jwt.decode(token, "env-secret", algorithms=[JWT_ALGORITHM])

    assert payload["role"] == "admin"
    assert payload["exp"] - payload["iat"] == 2 * 24 * 3600
