"""Prometheus metrics definitions."""
from __future__ import annotations

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST


CIRCUIT_BREAKER_STATE = Gauge(
    "challengeforge_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=half_open, 2=open)",
    ["name"],
)

CIRCUIT_BREAKER_CALLS = Counter(
    "challengeforge_circuit_breaker_calls_total",
    "Calls routed through a circuit breaker",
    ["name", "outcome"],
)

REPOSITORY_RETRIES = Counter(
    "challengeforge_repository_retries_total",
    "Retry wrapper attempt outcomes",
    ["domain", "operation", "outcome"],
)

EVENTS_PUBLISHED = Counter(
    "challengeforge_events_published_total",
    "Domain events published on the in-process bus",
    ["event_type"],
)

EVENT_HANDLER_FAILURES = Counter(
    "challengeforge_event_handler_failures_total",
    "Domain event handler failures",
    ["event_type"],
)


def render_metrics() -> bytes:
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
