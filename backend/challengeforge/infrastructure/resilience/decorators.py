"""Resilience decorators and the guarded client proxy."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional

from challengeforge.shared_kernel.context import OperationContext
from .circuit_breaker import CircuitBreaker
from .retry import RetryPolicy, with_retry


def with_circuit_breaker(breaker: CircuitBreaker) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await breaker.execute(func, *args, **kwargs)
        return wrapper
    return decorator


def retrying(
    policy: Optional[RetryPolicy] = None,
    domain_name: str = "generic",
):
    policy = policy or RetryPolicy()

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            context = OperationContext(func.__name__, domain_name)
            return await with_retry(lambda: func(*args, **kwargs), policy, context)
        return wrapper
    return decorator


class CircuitBreakerProxy:
    """Routes every public callable of ``client`` through ``breaker``.

    Non-callable attributes and private names are returned untouched.
    """

    def __init__(self, client: Any, breaker: CircuitBreaker) -> None:
        self._client = client
        self._breaker = breaker

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    @property
    def wrapped(self) -> Any:
        return self._client

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._client, name)
        if name.startswith("_") or not callable(attr):
            return attr

        @wraps(attr)
        async def guarded(*args: Any, **kwargs: Any) -> Any:
            return await self._breaker.execute(attr, *args, **kwargs)

        return guarded


def wrap_client_with_circuit_breaker(client: Any, breaker: CircuitBreaker) -> CircuitBreakerProxy:
    return CircuitBreakerProxy(client, breaker)
