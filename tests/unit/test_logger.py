"""
Unit tests for the JSON log formatter.
"""

import json
import logging

import pytest

from carelink.context import bind_identity, clear_context, request_id_var
from carelink.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="carelink",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Login rejected",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_sensitive_extras_are_dropped():
    line = JSONFormatter().format(
        _record(role="donor", password="hunter2", token="abc", Authorization="Bearer x")
    )

    payload = json.loads(line)
    assert payload["role"] == "donor"
    assert "password" not in payload
    assert "token" not in payload
    assert "Authorization" not in payload
    assert "hunter2" not in line


def test_request_context_is_included():
    request_id_var.set("req-123")
    bind_identity("abc", "volunteer")
    try:
        payload = json.loads(JSONFormatter().format(_record()))
    finally:
        clear_context()

    assert payload["request_id"] == "req-123"
    assert payload["identity_role"] == "volunteer"
    assert payload["message"] == "Login rejected"
