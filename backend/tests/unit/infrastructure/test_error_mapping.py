import asyncio

import pydantic
import pytest
from sqlalchemy import exc as sa_exc

from challengeforge.infrastructure.errors import classify_error, create_error_mapper, is_transient_error
from challengeforge.shared_kernel.context import OperationContext
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    ErrorKind,
    PersistenceError,
    ValidationError,
)


class WidgetError(DomainException):
    domain = "widget"


class WidgetNotFoundError(WidgetError, EntityNotFoundError):
    pass


class WidgetValidationError(WidgetError, ValidationError):
    pass


class WidgetPersistenceError(WidgetError, PersistenceError):
    pass


class BrokenWidgetError(WidgetError, ValidationError):
    def __init__(self, *args, **kwargs):
        raise RuntimeError("constructor is broken")


map_widget_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: WidgetNotFoundError,
        ErrorKind.VALIDATION: WidgetValidationError,
        ErrorKind.PERSISTENCE: WidgetPersistenceError,
    },
    WidgetError,
)


class _Model(pydantic.BaseModel):
    count: int


def _pydantic_error():
    try:
        _Model(count="many")
    except pydantic.ValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


def test_classify_by_tag_type_and_message():
    assert classify_error(EntityNotFoundError("x")) == ErrorKind.NOT_FOUND
    assert classify_error(_pydantic_error()) == ErrorKind.VALIDATION
    assert classify_error(sa_exc.OperationalError("SELECT 1", {}, Exception("down"))) == ErrorKind.PERSISTENCE
    assert classify_error(sa_exc.IntegrityError("INSERT", {}, Exception("dup"))) == ErrorKind.VALIDATION
    assert classify_error(asyncio.TimeoutError()) == ErrorKind.PERSISTENCE
    assert classify_error(RuntimeError("row does not exist")) == ErrorKind.NOT_FOUND
    assert classify_error(RuntimeError("violates check constraint")) == ErrorKind.VALIDATION
    assert classify_error(RuntimeError("something odd")) == ErrorKind.GENERIC


def test_transient_predicate():
    assert is_transient_error(sa_exc.OperationalError("SELECT 1", {}, Exception("down")))
    assert is_transient_error(ConnectionError("reset by peer"))
    assert is_transient_error(RuntimeError("deadlock detected"))
    assert is_transient_error(PersistenceError("x", transient=True))
    assert not is_transient_error(EntityNotFoundError("missing"))
    assert not is_transient_error(sa_exc.IntegrityError("INSERT", {}, Exception("connection dup")))
    assert not is_transient_error(RuntimeError("plain bug"))


def test_mapper_returns_domain_family_member():
    context = OperationContext("find_by_id", "widget", {"id": "w-1"})
    raw = RuntimeError("widget not found")
    mapped = map_widget_error(raw, context)

    assert isinstance(mapped, WidgetNotFoundError)
    assert isinstance(mapped, EntityNotFoundError)
    assert mapped.cause is raw
    assert mapped.context is context
    assert mapped.metadata["id"] == "w-1"
    assert mapped.code == "WIDGET_NOT_FOUND"


def test_mapper_is_idempotent_for_own_family():
    error = WidgetValidationError("bad widget")
    assert map_widget_error(error) is error


def test_mapper_translates_generic_domain_errors_keeping_metadata():
    original = ValidationError("bad id", metadata={"id": " "})
    mapped = map_widget_error(original, OperationContext("find_by_id", "widget", {"id": " "}))
    assert isinstance(mapped, WidgetValidationError)
    assert mapped.cause is original
    assert mapped.metadata == {"id": " "}


def test_mapper_marks_transient_persistence_failures():
    raw = sa_exc.OperationalError("UPDATE", {}, Exception("server closed the connection"))
    mapped = map_widget_error(raw)
    assert isinstance(mapped, WidgetPersistenceError)
    assert mapped.transient is True


def test_unmatched_errors_fall_back_to_generic():
    mapped = map_widget_error(KeyError("userEmail"))
    assert type(mapped) is WidgetError
    assert mapped.kind == ErrorKind.GENERIC


def test_mapper_never_raises_even_with_broken_constructor():
    mapper = create_error_mapper({ErrorKind.VALIDATION: BrokenWidgetError}, WidgetError)
    mapped = mapper(RuntimeError("invalid input"))
    assert type(mapped) is WidgetError
    assert mapped.message == "invalid input"
