"""Store client contract used by repositories.

Filters are equality matches on storage column names. A list, tuple or set
value means membership, ``None`` means ``IS NULL``. ``order_by`` is a
sequence of ``(column, "asc" | "desc")`` pairs.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Row = Dict[str, Any]
Filters = Mapping[str, Any]
OrderBy = Sequence[Tuple[str, str]]


class StoreTransaction(ABC):
    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        raise NotImplementedError

    @abstractmethod
    async def update(self, table: str, filters: Filters, values: Mapping[str, Any]) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> int:
        raise NotImplementedError

    @abstractmethod
    async def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class StoreClient(ABC):
    """Connection-level entry point: plain reads and transaction factory."""

    @abstractmethod
    async def begin(self) -> StoreTransaction:
        raise NotImplementedError

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        raise NotImplementedError

    @abstractmethod
    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        raise NotImplementedError

    async def close(self) -> None:
        return None


def is_membership(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))
