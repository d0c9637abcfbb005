"""
Name: Metrics (Prometheus)

Responsibilities:
  - Define the service's Prometheus metrics on a dedicated registry
  - Provide small, stable functions to record events and durations
  - Keep cardinality low (no account ids, no raw paths)
  - Render the /metrics response payload

Collaborators:
  - crosscutting/middleware.py: HTTP latency and counts
  - application/usecases/profile: access decisions and update outcomes
  - api/main.py: /metrics endpoint
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "account_access_requests_total",
    "Total HTTP requests",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "account_access_request_latency_seconds",
    "HTTP request latency (seconds)",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=_registry,
)

_access_decisions_total = Counter(
    "account_access_profile_decisions_total",
    "Profile visibility decisions",
    ["operation", "outcome"],
    registry=_registry,
)

_profile_updates_total = Counter(
    "account_access_profile_updates_total",
    "Profile update outcomes",
    ["outcome"],
    registry=_registry,
)

_fact_lookup_latency = Histogram(
    "account_access_fact_lookup_seconds",
    "Ownership fact gathering latency (seconds)",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
    registry=_registry,
)

# Numeric path segments collapse into a placeholder
_ID_SEGMENT = re.compile(r"/\d+(?=/|$)")


def _normalize_endpoint(path: str) -> str:
    return _ID_SEGMENT.sub("/{id}", path or "/")


def record_request_metrics(
    *, endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=str(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_access_decision(*, operation: str, allowed: bool) -> None:
    """operation: "read" | "update"."""
    _access_decisions_total.labels(
        operation=operation, outcome="allowed" if allowed else "denied"
    ).inc()


def record_profile_update(outcome: str) -> None:
    """outcome: "updated" | "noop" | an error code value."""
    _profile_updates_total.labels(outcome=outcome).inc()


def observe_fact_lookup(seconds: float) -> None:
    _fact_lookup_latency.observe(seconds)


def get_metrics_response() -> tuple[bytes, str]:
    """Return (body, content_type) for the /metrics endpoint."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
