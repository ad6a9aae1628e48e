"""Persistence: store contract, adapters and the transactional repository base."""

from .naming import camel_to_snake, snake_to_camel, to_domain_record, to_storage_record
from .store import StoreClient, StoreTransaction
from .memory_store import InMemoryStore
from .sqlalchemy_store import SQLAlchemyStore
from .repository import BaseRepository, SearchOptions, SearchResult

__all__ = [
    "camel_to_snake",
    "snake_to_camel",
    "to_domain_record",
    "to_storage_record",
    "StoreClient",
    "StoreTransaction",
    "InMemoryStore",
    "SQLAlchemyStore",
    "BaseRepository",
    "SearchOptions",
    "SearchResult",
]
