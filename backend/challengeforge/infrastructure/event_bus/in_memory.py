"""In-memory event bus for single-process deployments and tests."""
from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Optional
from uuid import UUID

import structlog

from challengeforge.infrastructure.observability.metrics import (
    EVENT_HANDLER_FAILURES,
    EVENTS_PUBLISHED,
)
from challengeforge.shared_kernel.domain_events import DomainEvent
from .dead_letter import DeadLetterQueue
from .handlers import EventHandlerRegistry
from .interfaces import EventBus, EventHandler

logger = structlog.get_logger(__name__)


class InMemoryEventBus(EventBus):
    def __init__(
        self,
        record_history: bool = False,
        history_limit: int = 1000,
        dead_letter_queue: Optional[DeadLetterQueue] = None,
    ) -> None:
        self._registry = EventHandlerRegistry()
        self._record_history = record_history
        self._history: Deque[DomainEvent] = deque(maxlen=history_limit)
        self._dead_letters = dead_letter_queue
        self._published = 0
        self._handler_failures = 0

    @property
    def dead_letter_queue(self) -> Optional[DeadLetterQueue]:
        return self._dead_letters

    async def publish(self, event: DomainEvent) -> str:
        event_type = event.event_type
        handlers = self._registry.get_handlers(event_type)
        self._published += 1
        EVENTS_PUBLISHED.labels(event_type).inc()
        if self._record_history:
            self._history.append(event)
        logger.debug(
            "event_published",
            event_type=event_type,
            event_id=str(event.event_id),
            handlers=len(handlers),
        )
        for handler in handlers:
            try:
                await handler(event)
            except Exception as exc:  # noqa: BLE001 - one handler must not break the others
                self._handler_failures += 1
                EVENT_HANDLER_FAILURES.labels(event_type).inc()
                logger.error(
                    "event_handler_failed",
                    event_type=event_type,
                    event_id=str(event.event_id),
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(exc),
                    exc_info=True,
                )
                if self._dead_letters is not None:
                    self._dead_letters.record(event, handler, exc)
        return event_type

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._registry.register(event_type, handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        return self._registry.unregister(event_type, handler)

    def get_event_history(
        self,
        event_type: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> List[DomainEvent]:
        events = [
            event
            for event in self._history
            if (event_type is None or event.event_type == event_type)
            and (correlation_id is None or event.correlation_id == correlation_id)
        ]
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def metrics(self) -> Dict[str, Any]:
        return {
            "published": self._published,
            "handler_failures": self._handler_failures,
            "handlers": self._registry.handler_counts(),
            "history_size": len(self._history),
            "dead_letters": len(self._dead_letters.pending()) if self._dead_letters is not None else 0,
        }

    def reset(self) -> None:
        """Drop history and counters; subscriptions are kept."""
        self._history.clear()
        self._published = 0
        self._handler_failures = 0
