"""Shared kernel primitives (events, entities, context, errors)."""

from .context import OperationContext
from .domain_events import DomainEvent
from .entity import AggregateRoot, EntityMapper, parse_datetime, utc_now
from .exceptions import (
    ErrorKind,
    DomainException,
    EntityNotFoundError,
    ValidationError,
    PersistenceError,
    ExternalServiceError,
    CircuitOpenError,
)

__all__ = [
    "OperationContext",
    "DomainEvent",
    "AggregateRoot",
    "EntityMapper",
    "parse_datetime",
    "utc_now",
    "ErrorKind",
    "DomainException",
    "EntityNotFoundError",
    "ValidationError",
    "PersistenceError",
    "ExternalServiceError",
    "CircuitOpenError",
]
