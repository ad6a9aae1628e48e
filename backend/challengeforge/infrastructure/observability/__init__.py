"""Observability utilities (metrics, logging)."""

from .metrics import (
    CIRCUIT_BREAKER_STATE,
    CIRCUIT_BREAKER_CALLS,
    REPOSITORY_RETRIES,
    EVENTS_PUBLISHED,
    EVENT_HANDLER_FAILURES,
    render_metrics,
    METRICS_CONTENT_TYPE,
)
from .structured_logging import configure_logging

__all__ = [
    "CIRCUIT_BREAKER_STATE",
    "CIRCUIT_BREAKER_CALLS",
    "REPOSITORY_RETRIES",
    "EVENTS_PUBLISHED",
    "EVENT_HANDLER_FAILURES",
    "render_metrics",
    "METRICS_CONTENT_TYPE",
    "configure_logging",
]
