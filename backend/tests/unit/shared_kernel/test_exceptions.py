import pytest

from challengeforge.shared_kernel.context import OperationContext
from challengeforge.shared_kernel.exceptions import (
    CircuitOpenError,
    DomainException,
    EntityNotFoundError,
    ErrorKind,
    ExternalServiceError,
    PersistenceError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error_class, kind, status",
    [
        (EntityNotFoundError, ErrorKind.NOT_FOUND, 404),
        (ValidationError, ErrorKind.VALIDATION, 400),
        (PersistenceError, ErrorKind.PERSISTENCE, 500),
        (DomainException, ErrorKind.GENERIC, 500),
        (ExternalServiceError, ErrorKind.EXTERNAL_SERVICE, 502),
        (CircuitOpenError, ErrorKind.CIRCUIT_OPEN, 503),
    ],
)
def test_error_kinds_and_status_codes(error_class, kind, status):
    error = error_class("boom")
    assert error.kind == kind
    assert error.status_code == status
    assert error.message == "boom"


def test_circuit_open_is_an_external_service_error():
    assert isinstance(CircuitOpenError("open"), ExternalServiceError)


def test_default_code_is_derived_from_domain_and_kind():
    assert EntityNotFoundError("missing").code == "GENERIC_NOT_FOUND"
    assert ValidationError("bad", code="CUSTOM").code == "CUSTOM"


def test_cause_and_metadata_are_preserved():
    cause = RuntimeError("driver exploded")
    error = PersistenceError("write failed", cause=cause, metadata={"id": "42"})
    assert error.cause is cause
    assert error.__cause__ is cause
    assert error.metadata == {"id": "42"}


def test_transient_flag_only_sticks_to_transient_kinds():
    assert PersistenceError("x", transient=True).transient is True
    assert DomainException("x", transient=True).transient is True
    assert EntityNotFoundError("x", transient=True).transient is False
    assert ValidationError("x", transient=True).transient is False


def test_to_dict_includes_context():
    context = OperationContext("find_by_id", "challenge", {"id": "c-1"})
    error = EntityNotFoundError("missing", metadata={"id": "c-1"}, context=context)
    data = error.to_dict()
    assert data["kind"] == "not_found"
    assert data["operation"] == "find_by_id"
    assert data["domain"] == "challenge"
    assert data["metadata"] == {"id": "c-1"}


def test_operation_context_metadata_is_read_only():
    context = OperationContext("save", "user", {"id": "u-1"})
    with pytest.raises(TypeError):
        context.metadata["id"] = "other"

    extended = context.with_metadata(created=True)
    assert dict(extended.metadata) == {"id": "u-1", "created": True}
    assert dict(context.metadata) == {"id": "u-1"}
    assert extended.as_log_fields() == {
        "operation": "save",
        "domain": "user",
        "context": {"id": "u-1", "created": True},
    }


def test_operation_context_is_hashable_with_dict_metadata():
    context = OperationContext("save", "user", {"id": "u-1", "patch": {"name": "Ada"}})

    seen = {context: "first"}

    assert seen[context] == "first"
    assert context.with_metadata(created=True) not in seen


def test_log_fields_keep_metadata_apart_from_call_fields():
    context = OperationContext("save", "user", {"error": "stale", "attempt": 7, "event": "x"})

    fields = context.as_log_fields()

    assert set(fields) == {"operation", "domain", "context"}
    assert fields["context"] == {"error": "stale", "attempt": 7, "event": "x"}
    assert OperationContext("save").as_log_fields() == {"operation": "save", "domain": "generic"}
