"""Shared kernel exception hierarchy."""
from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import OperationContext


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    PERSISTENCE = "persistence"
    GENERIC = "generic"
    EXTERNAL_SERVICE = "external_service"
    CIRCUIT_OPEN = "circuit_open"


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.PERSISTENCE: 500,
    ErrorKind.GENERIC: 500,
    ErrorKind.EXTERNAL_SERVICE: 502,
    ErrorKind.CIRCUIT_OPEN: 503,
}

# Only infrastructure-flavoured kinds may be retried.
_TRANSIENT_KINDS = frozenset({ErrorKind.PERSISTENCE, ErrorKind.GENERIC})


class DomainException(Exception):
    """Base exception for all domain errors.

    ``kind`` is the explicit tag every mapper and HTTP collaborator switches
    on; subclasses only narrow it.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.GENERIC
    domain: ClassVar[str] = "generic"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        *,
        cause: Optional[BaseException] = None,
        metadata: Optional[Dict[str, Any]] = None,
        context: Optional["OperationContext"] = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or f"{self.domain.upper()}_{self.kind.name}"
        self.cause = cause
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.context = context
        self.transient = transient and self.kind in _TRANSIENT_KINDS
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "metadata": dict(self.metadata),
        }
        if self.context is not None:
            data["operation"] = self.context.operation_name
            data["domain"] = self.context.domain_name
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return data


class EntityNotFoundError(DomainException):
    """Raised when a domain entity is not found."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(DomainException):
    """Raised when domain validation fails."""

    kind = ErrorKind.VALIDATION


class PersistenceError(DomainException):
    """Raised when the store or the network underneath it fails."""

    kind = ErrorKind.PERSISTENCE


class ExternalServiceError(DomainException):
    """Raised when an external service fails."""

    kind = ErrorKind.EXTERNAL_SERVICE


class CircuitOpenError(ExternalServiceError):
    """Raised when a circuit breaker is open."""

    kind = ErrorKind.CIRCUIT_OPEN
