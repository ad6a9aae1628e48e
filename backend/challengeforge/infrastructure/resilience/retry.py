"""Retry wrapper with exponential backoff for async operations."""
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from challengeforge.infrastructure.errors import is_transient_error
from challengeforge.infrastructure.observability.metrics import REPOSITORY_RETRIES
from challengeforge.shared_kernel.context import OperationContext
from .timeout import with_timeout

T = TypeVar("T")

logger = structlog.get_logger(__name__)

Sleeper = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times, and how patiently, an operation is retried.

    ``max_retries`` counts retries, so an operation runs at most
    ``max_retries + 1`` times. ``timeout`` bounds the whole call including
    every backoff pause.
    """

    max_retries: int = 3
    base_delay: float = 0.5
    max_delay: Optional[float] = None
    is_retryable: Callable[[BaseException], bool] = is_transient_error
    timeout: Optional[float] = None
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "RetryPolicy":
        values = {
            "max_retries": settings.REPOSITORY_MAX_RETRIES,
            "base_delay": settings.REPOSITORY_RETRY_BASE_DELAY,
            "max_delay": settings.REPOSITORY_RETRY_MAX_DELAY,
            "timeout": settings.REPOSITORY_OPERATION_TIMEOUT,
        }
        values.update(overrides)
        return cls(**values)

    def delay_for(self, attempt: int) -> float:
        delay = self.base_delay * (2 ** attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        if self.jitter:
            delay += random.random() * self.jitter
        return delay


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    context: Optional[OperationContext] = None,
    *,
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds, fails permanently or runs out of retries.

    The last error is re-raised unchanged. A ``policy.timeout`` raises
    ``asyncio.TimeoutError`` however many retries remain.
    """
    context = context or OperationContext("operation")
    return await with_timeout(_run_attempts(operation, policy, context, sleep), policy.timeout)


async def _run_attempts(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    context: OperationContext,
    sleep: Sleeper,
) -> T:
    fields = context.as_log_fields()
    labels = (context.domain_name, context.operation_name)
    attempt = 0
    while True:
        try:
            result = await operation()
        except Exception as exc:
            if not policy.is_retryable(exc):
                REPOSITORY_RETRIES.labels(*labels, "permanent").inc()
                logger.debug("operation_failed_permanently", attempt=attempt + 1, error=str(exc), **fields)
                raise
            if attempt >= policy.max_retries:
                REPOSITORY_RETRIES.labels(*labels, "exhausted").inc()
                logger.warning(
                    "operation_retries_exhausted",
                    attempts=attempt + 1,
                    error=str(exc),
                    **fields,
                )
                raise
            delay = policy.delay_for(attempt)
            REPOSITORY_RETRIES.labels(*labels, "retry").inc()
            logger.warning(
                "operation_retrying",
                attempt=attempt + 1,
                max_retries=policy.max_retries,
                delay=delay,
                error=str(exc),
                **fields,
            )
            attempt += 1
            await sleep(delay)
            continue
        if attempt:
            REPOSITORY_RETRIES.labels(*labels, "recovered").inc()
            logger.info("operation_recovered", attempts=attempt + 1, **fields)
        return result
