"""Event bus infrastructure."""

from .interfaces import EventBus, EventHandler
from .in_memory import InMemoryEventBus
from .handlers import EventHandlerRegistry
from .dead_letter import DeadLetterEntry, DeadLetterQueue

__all__ = [
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
    "EventHandlerRegistry",
    "DeadLetterEntry",
    "DeadLetterQueue",
]
