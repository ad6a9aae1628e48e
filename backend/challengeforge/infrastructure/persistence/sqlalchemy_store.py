"""SQLAlchemy 2.x async Core adapter for the store contract."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncTransaction, create_async_engine
from sqlalchemy.sql import Select

from .store import Filters, OrderBy, Row, StoreClient, StoreTransaction, is_membership


def _where(table: Table, filters: Optional[Filters]) -> List[Any]:
    clauses = []
    for key, value in (filters or {}).items():
        if key not in table.c:
            raise ValueError(f"invalid column '{key}' for table '{table.name}'")
        column = table.c[key]
        if value is None:
            clauses.append(column.is_(None))
        elif is_membership(value):
            clauses.append(column.in_(list(value)))
        else:
            clauses.append(column == value)
    return clauses


def _select_statement(
    table: Table,
    filters: Optional[Filters],
    order_by: Optional[OrderBy],
    limit: Optional[int],
    offset: int,
) -> Select:
    stmt = select(table).where(*_where(table, filters))
    for key, direction in order_by or []:
        if key not in table.c:
            raise ValueError(f"invalid sort column '{key}' for table '{table.name}'")
        column = table.c[key]
        stmt = stmt.order_by(column.desc() if str(direction).lower() == "desc" else column.asc())
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


class SQLAlchemyTransaction(StoreTransaction):
    def __init__(self, store: "SQLAlchemyStore", connection: AsyncConnection, transaction: AsyncTransaction) -> None:
        self._store = store
        self._connection = connection
        self._transaction = transaction

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        definition = await self._store.table(self._connection, table)
        result = await self._connection.execute(
            _select_statement(definition, filters, order_by, limit, offset)
        )
        return [dict(row) for row in result.mappings().all()]

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        definition = await self._store.table(self._connection, table)
        stmt = select(func.count()).select_from(definition).where(*_where(definition, filters))
        return int((await self._connection.execute(stmt)).scalar_one())

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        definition = await self._store.table(self._connection, table)
        stmt = insert(definition).values(**dict(values)).returning(*definition.c)
        result = await self._connection.execute(stmt)
        return dict(result.mappings().one())

    async def update(self, table: str, filters: Filters, values: Mapping[str, Any]) -> List[Row]:
        definition = await self._store.table(self._connection, table)
        stmt = (
            update(definition)
            .where(*_where(definition, filters))
            .values(**dict(values))
            .returning(*definition.c)
        )
        result = await self._connection.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def delete(self, table: str, filters: Filters) -> int:
        definition = await self._store.table(self._connection, table)
        result = await self._connection.execute(delete(definition).where(*_where(definition, filters)))
        return int(result.rowcount or 0)

    async def commit(self) -> None:
        try:
            await self._transaction.commit()
        finally:
            await self._connection.close()

    async def rollback(self) -> None:
        try:
            await self._transaction.rollback()
        finally:
            await self._connection.close()


class SQLAlchemyStore(StoreClient):
    """Async engine backed store; tables are reflected on first use and cached."""

    def __init__(self, engine: Union[AsyncEngine, str], **engine_options: Any) -> None:
        if isinstance(engine, str):
            engine = create_async_engine(engine, **engine_options)
        self._engine = engine
        self._metadata = MetaData()
        self._tables: Dict[str, Table] = {}
        self._reflect_lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def table(self, connection: AsyncConnection, name: str) -> Table:
        if name in self._tables:
            return self._tables[name]
        async with self._reflect_lock:
            if name not in self._tables:
                self._tables[name] = await connection.run_sync(
                    lambda sync_conn: Table(name, self._metadata, autoload_with=sync_conn)
                )
        return self._tables[name]

    async def begin(self) -> SQLAlchemyTransaction:
        connection = await self._engine.connect()
        try:
            transaction = await connection.begin()
        except Exception:
            await connection.close()
            raise
        return SQLAlchemyTransaction(self, connection, transaction)

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Row]:
        async with self._engine.connect() as connection:
            definition = await self.table(connection, table)
            result = await connection.execute(
                _select_statement(definition, filters, order_by, limit, offset)
            )
            return [dict(row) for row in result.mappings().all()]

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        async with self._engine.connect() as connection:
            definition = await self.table(connection, table)
            stmt = select(func.count()).select_from(definition).where(*_where(definition, filters))
            return int((await connection.execute(stmt)).scalar_one())

    async def close(self) -> None:
        await self._engine.dispose()
