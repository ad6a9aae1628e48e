"""In-memory store with snapshot-isolated transactions."""
from __future__ import annotations

import asyncio
import copy
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from .store import Filters, OrderBy, Row, StoreClient, StoreTransaction, is_membership

Tables = Dict[str, List[Row]]


def _matches(row: Mapping[str, Any], filters: Optional[Filters]) -> bool:
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if expected is None:
            if actual is not None:
                return False
        elif is_membership(expected):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _query(
    rows: List[Row],
    filters: Optional[Filters],
    order_by: Optional[OrderBy],
    limit: Optional[int],
    offset: int,
) -> List[Row]:
    selected = [row for row in rows if _matches(row, filters)]
    # Stable sorts applied from the least significant key; None sorts first ascending.
    for column, direction in reversed(list(order_by or [])):
        selected.sort(
            key=lambda row: (row.get(column) is not None, row.get(column)),
            reverse=str(direction).lower() == "desc",
        )
    selected = selected[offset:]
    if limit is not None:
        selected = selected[:limit]
    return [dict(row) for row in selected]


class InMemoryTransaction(StoreTransaction):
    def __init__(self, store: "InMemoryStore", tables: Tables) -> None:
        self._store = store
        self._tables = tables
        self._closed = False

    def _rows(self, table: str) -> List[Row]:
        if self._closed:
            raise RuntimeError("transaction already closed")
        return self._tables.setdefault(table, [])

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        return _query(self._rows(table), filters, order_by, limit, offset)

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        return sum(1 for row in self._rows(table) if _matches(row, filters))

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        row = dict(values)
        if row.get("id") is None:
            row["id"] = str(uuid4())
        self._rows(table).append(row)
        self._store.operations["insert"] += 1
        return dict(row)

    async def update(self, table: str, filters: Filters, values: Mapping[str, Any]) -> List[Row]:
        updated = []
        for row in self._rows(table):
            if _matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        self._store.operations["update"] += 1
        return updated

    async def delete(self, table: str, filters: Filters) -> int:
        rows = self._rows(table)
        kept = [row for row in rows if not _matches(row, filters)]
        removed = len(rows) - len(kept)
        rows[:] = kept
        self._store.operations["delete"] += 1
        return removed

    async def commit(self) -> None:
        if self._closed:
            raise RuntimeError("transaction already closed")
        self._closed = True
        await self._store._swap(self._tables)

    async def rollback(self) -> None:
        self._closed = True
        self._store.operations["rollback"] += 1


class InMemoryStore(StoreClient):
    """Dict-of-lists store for local runs and tests.

    ``begin`` works on a deep copy of every table; ``commit`` swaps the copy
    in, so a rolled back transaction leaves no trace. Concurrent commits are
    last-writer-wins.
    """

    def __init__(self, tables: Optional[Tables] = None) -> None:
        self._tables: Tables = copy.deepcopy(tables) if tables else {}
        self._lock = asyncio.Lock()
        self.operations: Counter = Counter()

    async def begin(self) -> InMemoryTransaction:
        self.operations["begin"] += 1
        return InMemoryTransaction(self, copy.deepcopy(self._tables))

    async def _swap(self, tables: Tables) -> None:
        async with self._lock:
            self._tables = tables
            self.operations["commit"] += 1

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        return _query(self._tables.get(table, []), filters, order_by, limit, offset)

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        return sum(1 for row in self._tables.get(table, []) if _matches(row, filters))

    def rows(self, table: str) -> List[Row]:
        """Committed rows of ``table`` (copies)."""
        return [dict(row) for row in self._tables.get(table, [])]
