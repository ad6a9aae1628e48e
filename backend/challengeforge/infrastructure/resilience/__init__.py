"""Resilience utilities (circuit breaker, retry, timeout)."""

from .circuit_breaker import (
    AI_PROVIDER_IGNORED_ERROR_CODES,
    CircuitBreaker,
    CircuitBreakerRegistry,
    CircuitState,
    categorize_error,
    error_code,
)
from .retry import RetryPolicy, with_retry
from .timeout import with_timeout
from .decorators import (
    CircuitBreakerProxy,
    retrying,
    with_circuit_breaker,
    wrap_client_with_circuit_breaker,
)

__all__ = [
    "AI_PROVIDER_IGNORED_ERROR_CODES",
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CircuitState",
    "categorize_error",
    "error_code",
    "RetryPolicy",
    "with_retry",
    "with_timeout",
    "CircuitBreakerProxy",
    "retrying",
    "with_circuit_breaker",
    "wrap_client_with_circuit_breaker",
]
