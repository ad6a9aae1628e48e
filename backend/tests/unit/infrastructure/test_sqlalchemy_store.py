from datetime import datetime, timezone

import pytest
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, MetaData, String, Table
from sqlalchemy.ext.asyncio import create_async_engine

from challengeforge.domains.focus_area.domain.entities import FocusArea
from challengeforge.domains.focus_area.domain.errors import FocusAreaNotFoundError
from challengeforge.domains.focus_area.infrastructure.repositories import FocusAreaRepository
from challengeforge.infrastructure.event_bus import InMemoryEventBus
from challengeforge.infrastructure.persistence import SQLAlchemyStore
from challengeforge.infrastructure.resilience import RetryPolicy

pytest.importorskip("aiosqlite")


async def _engine_with_tables(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    metadata = MetaData()
    Table(
        "notes",
        metadata,
        Column("id", String, primary_key=True),
        Column("title", String),
        Column("priority", Integer),
        Column("archived_at", DateTime, nullable=True),
    )
    Table(
        "focus_areas",
        metadata,
        Column("id", String, primary_key=True),
        Column("user_id", String, nullable=False),
        Column("name", String, nullable=False),
        Column("description", String),
        Column("priority", Integer),
        Column("active", Boolean),
        Column("metadata", JSON),
        Column("created_at", DateTime),
        Column("updated_at", DateTime),
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    return engine


@pytest.mark.asyncio
async def test_sqlalchemy_store_round_trip(tmp_path):
    store = SQLAlchemyStore(await _engine_with_tables(tmp_path))
    try:
        tx = await store.begin()
        row = await tx.insert("notes", {"id": "n1", "title": "first", "priority": 2})
        await tx.insert("notes", {"id": "n2", "title": "second", "priority": 1})
        await tx.commit()

        assert row == {"id": "n1", "title": "first", "priority": 2, "archived_at": None}
        rows = await store.select("notes", order_by=[("priority", "asc")])
        assert [r["id"] for r in rows] == ["n2", "n1"]
        assert await store.count("notes", {"id": ["n1", "n2"]}) == 2
        assert await store.count("notes", {"archived_at": None}) == 2

        tx = await store.begin()
        updated = await tx.update("notes", {"id": "n1"}, {"title": "changed"})
        assert updated[0]["title"] == "changed"
        await tx.rollback()
        assert (await store.select("notes", {"id": "n1"}))[0]["title"] == "first"

        tx = await store.begin()
        assert await tx.delete("notes", {"id": "n2"}) == 1
        await tx.commit()
        assert await store.count("notes") == 1
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_unknown_columns_are_rejected(tmp_path):
    store = SQLAlchemyStore(await _engine_with_tables(tmp_path))
    try:
        with pytest.raises(ValueError):
            await store.select("notes", {"colour": "red"})
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_repository_over_sqlalchemy_store(tmp_path, test_settings):
    store = SQLAlchemyStore(await _engine_with_tables(tmp_path))
    bus = InMemoryEventBus(record_history=True)
    repository = FocusAreaRepository(
        store=store,
        event_bus=bus,
        retry_policy=RetryPolicy(max_retries=1, base_delay=0),
        settings=test_settings,
    )
    try:
        saved = await repository.save(
            FocusArea(
                user_id="u-1",
                name="Prompting",
                priority=2,
                metadata={"level": "advanced"},
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )
        await repository.save(FocusArea(user_id="u-1", name="Ethics", priority=1))

        loaded = await repository.find_by_id(saved.id, throw_if_not_found=True)
        assert loaded.name == "Prompting"
        assert loaded.metadata == {"level": "advanced"}
        assert loaded.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

        by_priority = await repository.find_by_user_id("u-1")
        assert [area.name for area in by_priority] == ["Ethics", "Prompting"]

        assert await repository.delete(saved.id) is True
        with pytest.raises(FocusAreaNotFoundError):
            await repository.find_by_id(saved.id, throw_if_not_found=True)

        assert [event.event_type for event in bus.get_event_history()] == [
            "focus_area.created",
            "focus_area.created",
            "focus_area.deleted",
        ]
    finally:
        await store.close()
