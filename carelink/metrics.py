"""
Name: Prometheus Metrics

Responsibilities:
  - Request count and latency per normalized route
  - Per-role counters for logins, registrations and guard rejections
  - Moderation actions taken by administrators

Collaborators:
  - middleware.RequestContextMiddleware: record_request_metrics
  - guards: record_auth_failure (no_token, expired, blocked, ...)
  - api routers: record_login, record_registration, record_moderation

Constraints:
  - Labels stay low-cardinality: role, outcome, reason, action; never an id
  - Without prometheus_client every recorder is a no-op and /metrics says so
"""

import re
from typing import Dict, Optional

try:
    from prometheus_client import (
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )
except ImportError:
    CollectorRegistry = None

_UUID_SEGMENT = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)
_PROBE_SEGMENT = re.compile(r"/(check-username|check-email|check-name)/[^/]+")

# R: name -> (help, labels)
_COUNTERS = {
    "requests": ("Total HTTP requests", ("endpoint", "method", "status")),
    "auth_failures": ("Guard rejections by role and reason", ("role", "reason")),
    "logins": ("Login attempts by role and outcome", ("role", "outcome")),
    "registrations": ("Registration attempts by role and outcome", ("role", "outcome")),
    "moderation_actions": ("Administrator moderation actions", ("role", "action")),
}

# R: argon2 verification dominates login latency
_LATENCY_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

_registry = CollectorRegistry() if CollectorRegistry is not None else None
_counters: Dict[str, "Counter"] = {}
_latency: Optional["Histogram"] = None

if _registry is not None:
    for _name, (_help, _labels) in _COUNTERS.items():
        _counters[_name] = Counter(
            f"carelink_{_name}_total", _help, list(_labels), registry=_registry
        )
    _latency = Histogram(
        "carelink_request_latency_seconds",
        "HTTP request latency in seconds",
        ["endpoint", "method"],
        buckets=_LATENCY_BUCKETS,
        registry=_registry,
    )


def _inc(name: str, **labels: str) -> None:
    counter = _counters.get(name)
    if counter is not None:
        counter.labels(**labels).inc()


def normalize_endpoint(path: str) -> str:
    """R: /api/admin/donors/<uuid>/block -> /api/admin/donors/{id}/block"""
    path = _UUID_SEGMENT.sub("{id}", path)
    return _PROBE_SEGMENT.sub(r"/\1/{value}", path)


def status_class(code: int) -> str:
    if 100 <= code < 600:
        return f"{code // 100}xx"
    return "other"


def record_request_metrics(
    endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    route = normalize_endpoint(endpoint)
    _inc("requests", endpoint=route, method=method, status=status_class(status_code))
    if _latency is not None:
        _latency.labels(endpoint=route, method=method).observe(latency_seconds)


def record_auth_failure(role: str, reason: str) -> None:
    _inc("auth_failures", role=role, reason=reason)


def record_login(role: str, outcome: str) -> None:
    _inc("logins", role=role, outcome=outcome)


def record_registration(role: str, outcome: str) -> None:
    _inc("registrations", role=role, outcome=outcome)


def record_moderation(role: str, action: str) -> None:
    """R: action is approve, reject, block or unblock."""
    _inc("moderation_actions", role=role, action=action)


def is_prometheus_available() -> bool:
    return _registry is not None


def get_metrics_response() -> tuple[bytes, str]:
    """
    R: Exposition body for /metrics.

    Returns:
        Tuple of (body_bytes, content_type)
    """
    if _registry is None:
        return b"# prometheus_client not installed\n", "text/plain"
    return generate_latest(_registry), CONTENT_TYPE_LATEST
