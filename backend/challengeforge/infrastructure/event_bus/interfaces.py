"""Event bus interfaces."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, List

from challengeforge.shared_kernel.domain_events import DomainEvent

EventHandler = Callable[[Any], Awaitable[None]]


class EventBus(ABC):
    """Abstract event bus.

    ``publish`` must not raise because of a subscriber: handler failures are
    the bus's problem, never the publisher's.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> str:
        raise NotImplementedError

    async def publish_all(self, events: Iterable[DomainEvent]) -> List[str]:
        published = []
        for event in events:
            published.append(await self.publish(event))
        return published

    @abstractmethod
    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        raise NotImplementedError
