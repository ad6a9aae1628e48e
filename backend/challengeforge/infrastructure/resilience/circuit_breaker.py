"""Circuit breaker implementation."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, FrozenSet, Iterable, Optional, TypeVar
import asyncio
import inspect

import httpx
import structlog

from challengeforge.infrastructure.observability.metrics import (
    CIRCUIT_BREAKER_CALLS,
    CIRCUIT_BREAKER_STATE,
)
from challengeforge.shared_kernel.exceptions import CircuitOpenError
from .timeout import with_timeout

T = TypeVar("T")

logger = structlog.get_logger(__name__)

# Provider responses that say "slow down", not "I am broken".
AI_PROVIDER_IGNORED_ERROR_CODES: FrozenSet[str] = frozenset(
    {"rate_limit_exceeded", "tokens_exceeded", "context_length_exceeded"}
)

_RATE_LIMIT_CODES = frozenset({"rate_limit_exceeded", "tokens_exceeded", "429"})


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


_STATE_GAUGE_VALUES = {
    CircuitState.CLOSED: 0,
    CircuitState.HALF_OPEN: 1,
    CircuitState.OPEN: 2,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def error_code(error: BaseException) -> Optional[str]:
    """Return the provider code of an error, falling back to its HTTP status."""
    code = getattr(error, "code", None)
    if code is None:
        code = getattr(error, "status", None)
    if code is None:
        code = getattr(error, "status_code", None)
    return str(code) if code is not None else None


def _http_status(error: BaseException) -> Optional[int]:
    status = getattr(error, "status", None)
    if status is None and isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def categorize_error(error: BaseException) -> str:
    """Bucket a failure into network / timeout / rate_limit / auth / server / client / unknown."""
    code = (error_code(error) or "").lower()
    status = _http_status(error)
    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)) or code == "timeout":
        return "timeout"
    if code in _RATE_LIMIT_CODES or status == 429:
        return "rate_limit"
    if status in (401, 403):
        return "auth"
    if status is not None and status >= 500:
        return "server"
    if status is not None and 400 <= status < 500:
        return "client"
    if isinstance(error, (ConnectionError, httpx.TransportError)) or code == "connection_error":
        return "network"

    message = str(error).lower()
    if "timeout" in message or "timed out" in message:
        return "timeout"
    if "rate limit" in message:
        return "rate_limit"
    if "unauthorized" in message or "authentication" in message:
        return "auth"
    if "network" in message or "connection" in message or "econnrefused" in message:
        return "network"
    return "unknown"


@dataclass
class CircuitBreaker:
    """Fail-fast guard around a single external dependency.

    ``failure_threshold`` consecutive failures inside ``rolling_window`` trip
    the breaker. While OPEN no call reaches the dependency; after
    ``recovery_timeout`` at most ``half_open_max_calls`` trial calls are let
    through. Errors whose code is in ``ignored_error_codes`` neither count as
    failures nor reset the count.
    """

    name: str
    failure_threshold: int = 5
    recovery_timeout: timedelta = timedelta(seconds=30)
    rolling_window: timedelta = timedelta(seconds=60)
    half_open_max_calls: int = 1
    call_timeout: Optional[float] = None
    ignored_error_codes: FrozenSet[str] = frozenset()
    fallback: Optional[Callable[..., Any]] = None
    clock: Callable[[], datetime] = _utc_now

    _state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _failures: Deque[datetime] = field(default_factory=deque, init=False, repr=False)
    _opened_at: Optional[datetime] = field(default=None, init=False)
    _half_open_in_flight: int = field(default=0, init=False)
    _last_failure: Optional[Dict[str, Any]] = field(default=None, init=False, repr=False)
    _stats: Dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if self.half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be >= 1")
        self.ignored_error_codes = frozenset(str(code) for code in self.ignored_error_codes)
        self._reset_stats()
        CIRCUIT_BREAKER_STATE.labels(self.name).set(_STATE_GAUGE_VALUES[self._state])

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return len(self._failures)

    async def execute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        async with self._lock:
            admitted = self._admit()
            is_trial = admitted and self._state == CircuitState.HALF_OPEN
            if is_trial:
                self._half_open_in_flight += 1
            self._stats["total_calls"] += 1

        if not admitted:
            return await self._reject(*args, **kwargs)

        try:
            result = await with_timeout(self._invoke(func, *args, **kwargs), self.call_timeout)
        except asyncio.CancelledError:
            # No await here: the task is being cancelled.
            self._on_cancelled(is_trial)
            raise
        except Exception as exc:
            async with self._lock:
                self._on_failure(exc, is_trial)
            raise

        async with self._lock:
            self._on_success(is_trial)
        return result

    def wrap(self, func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
        async def guarded(*args: Any, **kwargs: Any) -> Any:
            return await self.execute(func, *args, **kwargs)

        guarded.__name__ = getattr(func, "__name__", "guarded")
        guarded.__doc__ = getattr(func, "__doc__", None)
        return guarded

    def status(self) -> Dict[str, Any]:
        retry_after = self._retry_after()
        return {
            "name": self.name,
            "state": self._state.value,
            "healthy": self.is_healthy(),
            "failure_count": len(self._failures),
            "failure_threshold": self.failure_threshold,
            "opened_at": self._opened_at.isoformat() if self._opened_at else None,
            "retry_after_seconds": retry_after,
            "half_open_in_flight": self._half_open_in_flight,
            "last_failure": dict(self._last_failure) if self._last_failure else None,
            "stats": dict(self._stats),
        }

    def is_healthy(self) -> bool:
        return self._state != CircuitState.OPEN

    def force_state(self, state: CircuitState) -> None:
        """Manually move the breaker (operations tooling and tests)."""
        if state == CircuitState.CLOSED:
            self._failures.clear()
        self._half_open_in_flight = 0
        self._transition(state)

    def reset(self) -> None:
        self._failures.clear()
        self._half_open_in_flight = 0
        self._last_failure = None
        self._reset_stats()
        self._transition(CircuitState.CLOSED)

    async def _invoke(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        if inspect.iscoroutinefunction(func):
            return await func(*args, **kwargs)
        result = await asyncio.to_thread(func, *args, **kwargs)
        if inspect.isawaitable(result):
            return await result
        return result

    def _admit(self) -> bool:
        if self._state == CircuitState.OPEN:
            if not self._should_attempt_reset():
                return False
            self._half_open_in_flight = 0
            self._transition(CircuitState.HALF_OPEN)
        if self._state == CircuitState.HALF_OPEN:
            return self._half_open_in_flight < self.half_open_max_calls
        return True

    async def _reject(self, *args: Any, **kwargs: Any) -> Any:
        self._stats["rejected"] += 1
        CIRCUIT_BREAKER_CALLS.labels(self.name, "rejected").inc()
        error = CircuitOpenError(
            f"Circuit {self.name} is open",
            code="CIRCUIT_OPEN",
            metadata={"breaker": self.name, "retry_after_seconds": self._retry_after()},
        )
        logger.info("circuit_breaker_rejected", breaker=self.name, state=self._state.value)
        if self.fallback is None:
            raise error
        result = self.fallback(error, *args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _should_attempt_reset(self) -> bool:
        if self._opened_at is None:
            return True
        return self.clock() - self._opened_at >= self.recovery_timeout

    def _retry_after(self) -> Optional[float]:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return None
        remaining = self.recovery_timeout - (self.clock() - self._opened_at)
        return max(remaining.total_seconds(), 0.0)

    def _on_success(self, is_trial: bool) -> None:
        self._stats["successes"] += 1
        CIRCUIT_BREAKER_CALLS.labels(self.name, "success").inc()
        if is_trial:
            self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)
            if self._state == CircuitState.HALF_OPEN:
                self._failures.clear()
                self._transition(CircuitState.CLOSED)
            return
        if self._state == CircuitState.CLOSED:
            self._failures.clear()

    def _on_cancelled(self, is_trial: bool) -> None:
        if not is_trial:
            return
        self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)
        if self._state == CircuitState.HALF_OPEN:
            logger.info("circuit_breaker_trial_cancelled", breaker=self.name)
            self._transition(CircuitState.OPEN)

    def _on_failure(self, error: BaseException, is_trial: bool) -> None:
        if is_trial:
            self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)

        code = error_code(error)
        if code is not None and code in self.ignored_error_codes:
            self._stats["ignored"] += 1
            CIRCUIT_BREAKER_CALLS.labels(self.name, "ignored").inc()
            logger.info("circuit_breaker_ignored_error", breaker=self.name, code=code)
            return

        now = self.clock()
        self._stats["failures"] += 1
        CIRCUIT_BREAKER_CALLS.labels(self.name, "failure").inc()
        self._last_failure = {
            "category": categorize_error(error),
            "message": str(error),
            "at": now.isoformat(),
        }

        if is_trial and self._state == CircuitState.HALF_OPEN:
            self._failures.clear()
            self._transition(CircuitState.OPEN)
            return
        if self._state != CircuitState.CLOSED:
            return

        self._failures.append(now)
        horizon = now - self.rolling_window
        while self._failures and self._failures[0] < horizon:
            self._failures.popleft()
        if len(self._failures) >= self.failure_threshold:
            self._failures.clear()
            self._transition(CircuitState.OPEN)

    def _transition(self, state: CircuitState) -> None:
        previous = self._state
        self._state = state
        if state == CircuitState.OPEN:
            self._opened_at = self.clock()
        elif state == CircuitState.CLOSED:
            self._opened_at = None
        CIRCUIT_BREAKER_STATE.labels(self.name).set(_STATE_GAUGE_VALUES[state])
        if previous != state:
            logger.warning(
                "circuit_breaker_state_changed",
                breaker=self.name,
                previous=previous.value,
                state=state.value,
            )

    def _reset_stats(self) -> None:
        self._stats = {
            "total_calls": 0,
            "successes": 0,
            "failures": 0,
            "rejected": 0,
            "ignored": 0,
        }


class CircuitBreakerRegistry:
    """Named breakers built from configuration defaults."""

    def __init__(self, settings: Any) -> None:
        self._settings = settings
        self._breakers: Dict[str, CircuitBreaker] = {}

    def defaults(self) -> Dict[str, Any]:
        s = self._settings
        return {
            "failure_threshold": s.CIRCUIT_FAILURE_THRESHOLD,
            "recovery_timeout": timedelta(seconds=s.CIRCUIT_RECOVERY_TIMEOUT_SECONDS),
            "rolling_window": timedelta(seconds=s.CIRCUIT_ROLLING_WINDOW_SECONDS),
            "half_open_max_calls": s.CIRCUIT_HALF_OPEN_MAX_CALLS,
            "call_timeout": s.CIRCUIT_CALL_TIMEOUT,
            "ignored_error_codes": frozenset(s.CIRCUIT_IGNORED_ERROR_CODES),
        }

    def get_or_create(self, name: str, **overrides: Any) -> CircuitBreaker:
        if name not in self._breakers:
            options = {**self.defaults(), **overrides}
            self._breakers[name] = CircuitBreaker(name=name, **options)
        return self._breakers[name]

    def create_for_ai(self, name: str = "ai_provider", **overrides: Any) -> CircuitBreaker:
        ignored: Iterable[str] = overrides.pop(
            "ignored_error_codes", self._settings.CIRCUIT_IGNORED_ERROR_CODES
        )
        overrides["ignored_error_codes"] = frozenset(ignored) | AI_PROVIDER_IGNORED_ERROR_CODES
        return self.get_or_create(name, **overrides)

    def get(self, name: str) -> Optional[CircuitBreaker]:
        return self._breakers.get(name)

    def check_health(self) -> Dict[str, Any]:
        statuses = {name: breaker.status() for name, breaker in self._breakers.items()}
        return {
            "healthy": all(status["healthy"] for status in statuses.values()),
            "breakers": statuses,
        }

    def reset_all(self) -> None:
        for breaker in self._breakers.values():
            breaker.reset()
