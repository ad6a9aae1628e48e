"""Aggregate root and entity mapper contracts."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .domain_events import DomainEvent

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AggregateRoot:
    """Base for entities that raise domain events while they mutate.

    Events accumulate in memory; only the repository reads them
    (``pending_events``) and clears them (``clear_events``), after commit.
    """

    _events: List[DomainEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def record_event(self, event_type: str, **payload: Any) -> DomainEvent:
        event = DomainEvent(event_type=event_type, payload=payload)
        self._events.append(event)
        return event

    def pending_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EntityMapper(ABC, Generic[T]):
    """Translates between entities and domain-named (camelCase) records."""

    @abstractmethod
    def to_domain(self, record: Dict[str, Any]) -> T:
        raise NotImplementedError

    @abstractmethod
    def to_persistence(self, entity: T) -> Dict[str, Any]:
        raise NotImplementedError


def parse_datetime(value: Any) -> Optional[datetime]:
    """Accept datetimes or ISO strings from the store; naive values are UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
