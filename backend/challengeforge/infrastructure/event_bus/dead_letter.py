"""In-process dead-letter queue for failed event deliveries."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

import structlog

from challengeforge.shared_kernel.domain_events import DomainEvent
from .interfaces import EventHandler

logger = structlog.get_logger(__name__)

PENDING = "pending"
RESOLVED = "resolved"


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


@dataclass
class DeadLetterEntry:
    event: DomainEvent
    handler: EventHandler
    error_message: str
    error_type: str
    entry_id: str = field(default_factory=lambda: str(uuid4()))
    failed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    retry_count: int = 0
    last_retry_at: Optional[datetime] = None
    status: str = PENDING

    @property
    def handler_name(self) -> str:
        return _handler_name(self.handler)


class DeadLetterQueue:
    """Keeps (event, handler, error) triples so a single delivery can be replayed."""

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self._entries: Dict[str, DeadLetterEntry] = {}
        self._max_entries = max_entries

    def record(self, event: DomainEvent, handler: EventHandler, error: BaseException) -> DeadLetterEntry:
        entry = DeadLetterEntry(
            event=event,
            handler=handler,
            error_message=str(error),
            error_type=type(error).__name__,
        )
        self._entries[entry.entry_id] = entry
        if self._max_entries is not None and len(self._entries) > self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        logger.info(
            "dead_letter_recorded",
            entry_id=entry.entry_id,
            event_type=event.event_type,
            handler=entry.handler_name,
        )
        return entry

    def get(self, entry_id: str) -> Optional[DeadLetterEntry]:
        return self._entries.get(entry_id)

    def pending(self, event_type: Optional[str] = None) -> List[DeadLetterEntry]:
        return [
            entry
            for entry in self._entries.values()
            if entry.status == PENDING and (event_type is None or entry.event.event_type == event_type)
        ]

    async def retry(self, entry_id: str) -> bool:
        """Re-deliver one entry to the handler that failed; True when it now succeeds."""
        entry = self._entries.get(entry_id)
        if entry is None or entry.status != PENDING:
            return False
        entry.retry_count += 1
        entry.last_retry_at = datetime.now(timezone.utc)
        try:
            await entry.handler(entry.event)
        except Exception as exc:  # noqa: BLE001 - kept pending for a later retry
            entry.error_message = str(exc)
            entry.error_type = type(exc).__name__
            logger.warning(
                "dead_letter_retry_failed",
                entry_id=entry_id,
                retry_count=entry.retry_count,
                error=str(exc),
            )
            return False
        entry.status = RESOLVED
        logger.info("dead_letter_resolved", entry_id=entry_id, retry_count=entry.retry_count)
        return True

    async def retry_all(self, event_type: Optional[str] = None) -> Dict[str, int]:
        results = {"succeeded": 0, "failed": 0}
        for entry in self.pending(event_type):
            if await self.retry(entry.entry_id):
                results["succeeded"] += 1
            else:
                results["failed"] += 1
        return results

    def remove(self, entry_id: str) -> bool:
        return self._entries.pop(entry_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
