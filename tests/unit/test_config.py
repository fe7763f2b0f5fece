"""
Unit tests for Settings validation.
"""

import pytest
from pydantic import ValidationError

from carelink.config import Settings

pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    values = dict(database_url="postgresql://x", jwt_secret="s3cret", app_env="test")
    values.update(overrides)
    return Settings(**values)


def test_missing_secret_is_refused():
    with pytest.raises(ValidationError):
        _settings(jwt_secret="")


def test_insecure_secret_allowed_outside_production():
    settings = _settings(jwt_secret="", allow_insecure_jwt_secret=True, app_env="development")

    assert settings.uses_insecure_jwt_secret() is True
    assert settings.resolved_jwt_secret()


def test_insecure_secret_refused_in_production():
    with pytest.raises(ValidationError):
        _settings(jwt_secret="", allow_insecure_jwt_secret=True, app_env="production")


def test_bootstrap_admin_needs_both_values():
    with pytest.raises(ValidationError):
        _settings(bootstrap_admin_username="root")


@pytest.mark.parametrize("field", ["jwt_ttl_days", "max_upload_bytes", "max_home_photos"])
def test_limits_must_be_positive(field):
    with pytest.raises(ValidationError):
        _settings(**{field: 0})


def test_unknown_environment():
    with pytest.raises(ValidationError):
        _settings(app_env="staging-ish")


def test_environment_is_normalized():
    assert _settings(app_env=" Production ").is_production() is True


def test_allowed_origins_list():
    settings = _settings(allowed_origins="http://a.test, ,http://b.test")

    assert settings.get_allowed_origins_list() == ["http://a.test", "http://b.test"]
