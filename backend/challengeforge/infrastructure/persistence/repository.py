"""Transactional repository base.

Every public operation runs through ``_execute``::

    error-map( with_retry( error-map( core ) ) )

so callers only ever see the domain's own error family, retries only ever
see already-classified errors, and domain events leave the repository only
after the transaction that produced them has committed.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    Generic,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from challengeforge.core.config import Settings, settings as default_settings
from challengeforge.infrastructure.errors import ErrorMapper
from challengeforge.infrastructure.event_bus import EventBus
from challengeforge.infrastructure.resilience.retry import RetryPolicy, with_retry
from challengeforge.shared_kernel.context import OperationContext
from challengeforge.shared_kernel.domain_events import DomainEvent
from challengeforge.shared_kernel.entity import AggregateRoot, EntityMapper
from challengeforge.shared_kernel.exceptions import EntityNotFoundError, ValidationError
from .naming import camel_to_snake, snake_to_camel, to_domain_record, to_storage_record
from .store import StoreClient, StoreTransaction

T = TypeVar("T", bound=AggregateRoot)
R = TypeVar("R")

EntityId = Union[str, int, UUID]

logger = structlog.get_logger(__name__)

MAX_ID_LENGTH = 255


class SearchOptions(BaseModel):
    """Paging and sorting for ``search``; field names follow the domain convention."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    sort_by: str = "createdAt"
    sort_dir: Literal["asc", "desc"] = "desc"


@dataclass
class SearchResult(Generic[R]):
    results: List[R] = field(default_factory=list)
    total: int = 0


class BaseRepository(Generic[T]):
    """Declarative base for per-domain repositories.

    Subclasses only declare configuration; collaborators are injected.
    """

    table_name: ClassVar[str]
    domain_name: ClassVar[str]
    entity_type: ClassVar[Type[AggregateRoot]]
    mapper: ClassVar[EntityMapper]
    schema: ClassVar[Optional[Type[BaseModel]]] = None
    filter_schema: ClassVar[Optional[Type[BaseModel]]] = None
    error_mapper: ClassVar[ErrorMapper]
    sortable_fields: ClassVar[FrozenSet[str]] = frozenset({"createdAt", "updatedAt"})
    validate_uuids: ClassVar[bool] = False

    def __init__(
        self,
        store: StoreClient,
        event_bus: Optional[EventBus] = None,
        retry_policy: Optional[RetryPolicy] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.event_bus = event_bus
        self.settings = settings or default_settings
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)

    # ------------------------------------------------------------------ reads

    async def find_by_id(self, entity_id: EntityId, throw_if_not_found: bool = False) -> Optional[T]:
        async def core() -> Optional[T]:
            self._validate_id(entity_id)
            rows = await self.store.select(self.table_name, {"id": self._storage_id(entity_id)}, limit=1)
            if not rows:
                if throw_if_not_found:
                    raise self._not_found(entity_id)
                return None
            return self._to_entity(rows[0])

        return await self._execute("find_by_id", core, id=entity_id)

    async def search(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        options: Optional[Union[SearchOptions, Mapping[str, Any]]] = None,
    ) -> SearchResult[T]:
        async def core() -> SearchResult[T]:
            criteria = to_storage_record(self._validate_filters(filters))
            opts = self._validate_options(options)
            order_by = [(camel_to_snake(opts.sort_by), opts.sort_dir)]
            rows = await self.store.select(
                self.table_name,
                criteria,
                order_by=order_by,
                limit=opts.limit,
                offset=opts.offset,
            )
            total = await self.store.count(self.table_name, criteria)
            return SearchResult(results=[self._to_entity(row) for row in rows], total=total)

        return await self._execute("search", core, filters=dict(filters or {}))

    async def find_by_filter(
        self,
        filters: Mapping[str, Any],
        options: Optional[Union[SearchOptions, Mapping[str, Any]]] = None,
    ) -> List[T]:
        return (await self.search(filters, options)).results

    async def find_all(self, options: Optional[Union[SearchOptions, Mapping[str, Any]]] = None) -> List[T]:
        return (await self.search(None, options)).results

    # ----------------------------------------------------------------- writes

    async def save(self, entity: T) -> T:
        """Insert (no id yet) or update the entity, then publish its events.

        Returns the entity re-hydrated from the stored row. Events are only
        cleared from ``entity`` once the write has committed.
        """
        entity_id = getattr(entity, "id", None)
        is_new = entity_id is None
        pending = entity.pending_events() if isinstance(entity, AggregateRoot) else []
        context = self._context("save", id=entity_id, created=is_new)

        async def core() -> T:
            self._check_entity_type(entity)
            record = self._validated_record(entity)
            values = to_storage_record(record)
            values.pop("id", None)
            async with self.transaction(context) as tx:
                if is_new:
                    row = await tx.insert(self.table_name, {"id": str(uuid4()), **values})
                else:
                    rows = await tx.update(self.table_name, {"id": self._storage_id(entity_id)}, values)
                    if not rows:
                        raise self._not_found(entity_id)
                    row = rows[0]
                return self._to_entity(row)

        saved = await self._run(context, core)

        entity.clear_events()
        events = list(pending)
        if is_new and not events:
            events.append(DomainEvent(event_type=self.event_type("created"), payload=self.created_event_payload(saved)))
        await self._publish(events, context)
        return saved

    async def update(self, entity_id: EntityId, patch: Mapping[str, Any]) -> T:
        entity = await self.find_by_id(entity_id, throw_if_not_found=True)
        changes = {camel_to_snake(key): value for key, value in (patch or {}).items()}
        try:
            entity.update(**changes)
        except Exception as exc:
            raise self.error_mapper(exc, self._context("update", id=entity_id))
        return await self.save(entity)

    async def delete(self, entity_id: EntityId) -> bool:
        entity = await self.find_by_id(entity_id, throw_if_not_found=True)
        context = self._context("delete", id=entity_id)

        async def core() -> bool:
            async with self.transaction(context) as tx:
                removed = await tx.delete(self.table_name, {"id": self._storage_id(entity_id)})
                if not removed:
                    raise self._not_found(entity_id)
            return True

        await self._run(context, core)
        await self._publish(
            [DomainEvent(event_type=self.event_type("deleted"), payload=self.deleted_event_payload(entity))],
            context,
        )
        return True

    # ------------------------------------------------------------ transaction

    @asynccontextmanager
    async def transaction(self, context: Optional[OperationContext] = None) -> AsyncIterator[StoreTransaction]:
        context = context or self._context("transaction")
        fields = context.as_log_fields()
        tx = await self.store.begin()
        try:
            yield tx
            await tx.commit()
        except Exception as exc:
            try:
                await tx.rollback()
            except Exception as rollback_error:  # noqa: BLE001 - the original error wins
                logger.error(
                    "transaction_rollback_failed",
                    error=str(rollback_error),
                    original_error=str(exc),
                    **fields,
                )
            else:
                logger.info("transaction_rolled_back", error=str(exc), **fields)
            raise
        logger.debug("transaction_committed", **fields)

    # ------------------------------------------------------- extension points

    def event_type(self, action: str) -> str:
        return f"{self.domain_name}.{action}"

    def created_event_payload(self, entity: T) -> Dict[str, Any]:
        return self.mapper.to_persistence(entity)

    def deleted_event_payload(self, entity: T) -> Dict[str, Any]:
        return {"id": str(entity.id)}

    # ---------------------------------------------------------------- helpers

    def _context(self, operation_name: str, **metadata: Any) -> OperationContext:
        return OperationContext(operation_name, self.domain_name, metadata)

    async def _execute(self, operation_name: str, core: Callable[[], Awaitable[R]], **metadata: Any) -> R:
        return await self._run(self._context(operation_name, **metadata), core)

    async def _run(self, context: OperationContext, core: Callable[[], Awaitable[R]]) -> R:
        async def attempt() -> R:
            try:
                return await core()
            except Exception as exc:
                raise self.error_mapper(exc, context)

        try:
            return await with_retry(attempt, self.retry_policy, context)
        except Exception as exc:
            raise self.error_mapper(exc, context)

    async def _publish(self, events: Sequence[DomainEvent], context: OperationContext) -> None:
        if not events:
            return
        fields = context.as_log_fields()
        if self.event_bus is None:
            logger.debug("events_dropped_no_bus", count=len(events), **fields)
            return
        for event in events:
            try:
                await self.event_bus.publish(event)
            except Exception as exc:  # noqa: BLE001 - data is already committed
                logger.error(
                    "event_publication_failed",
                    event_type=event.event_type,
                    event_id=str(event.event_id),
                    error=str(exc),
                    **fields,
                )
        logger.debug("events_published", count=len(events), **fields)

    def _validate_id(self, entity_id: Any) -> None:
        label = f"{self.domain_name} id"
        if entity_id is None or isinstance(entity_id, bool) or not isinstance(entity_id, (str, int, UUID)):
            raise ValidationError(
                f"Invalid {label}: expected a string, integer or UUID",
                metadata={"id": entity_id},
            )
        text = str(entity_id)
        if not text.strip():
            raise ValidationError(f"Invalid {label}: must not be empty", metadata={"id": entity_id})
        if any(char.isspace() for char in text):
            raise ValidationError(f"Invalid {label}: must not contain whitespace", metadata={"id": entity_id})
        if len(text) > MAX_ID_LENGTH:
            raise ValidationError(
                f"Invalid {label}: longer than {MAX_ID_LENGTH} characters",
                metadata={"id": entity_id},
            )
        if self.validate_uuids and not isinstance(entity_id, UUID):
            try:
                UUID(text)
            except ValueError:
                raise ValidationError(f"Invalid {label}: not a UUID", metadata={"id": entity_id}) from None

    @staticmethod
    def _storage_id(entity_id: EntityId) -> Any:
        return str(entity_id) if isinstance(entity_id, UUID) else entity_id

    def _not_found(self, entity_id: Any) -> EntityNotFoundError:
        label = self.domain_name.replace("_", " ").capitalize()
        return EntityNotFoundError(f"{label} with id {entity_id} not found", metadata={"id": entity_id})

    def _check_entity_type(self, entity: Any) -> None:
        if not isinstance(entity, self.entity_type):
            raise ValidationError(
                f"Expected {self.entity_type.__name__}, got {type(entity).__name__}",
                metadata={"type": type(entity).__name__},
            )

    def _validated_record(self, entity: T) -> Dict[str, Any]:
        record = self.mapper.to_persistence(entity)
        if self.schema is not None:
            self.schema.model_validate(record)
        return record

    def _validate_filters(self, filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if self.filter_schema is None:
            return dict(filters or {})
        model = self.filter_schema.model_validate(dict(filters or {}))
        return model.model_dump(by_alias=True, exclude_unset=True)

    def _validate_options(self, options: Optional[Union[SearchOptions, Mapping[str, Any]]]) -> SearchOptions:
        opts = options if isinstance(options, SearchOptions) else SearchOptions.model_validate(dict(options or {}))
        limit = opts.limit if opts.limit is not None else self.settings.SEARCH_DEFAULT_LIMIT
        if limit > self.settings.SEARCH_MAX_LIMIT:
            raise ValidationError(
                f"limit must be at most {self.settings.SEARCH_MAX_LIMIT}",
                metadata={"limit": limit},
            )
        sort_by = snake_to_camel(opts.sort_by)
        if sort_by not in self.sortable_fields:
            raise ValidationError(
                f"Cannot sort {self.domain_name} by '{opts.sort_by}'",
                metadata={"sortBy": opts.sort_by, "sortable": sorted(self.sortable_fields)},
            )
        return opts.model_copy(update={"limit": limit, "sort_by": sort_by})

    def _to_entity(self, row: Mapping[str, Any]) -> T:
        return self.mapper.to_domain(to_domain_record(row))
