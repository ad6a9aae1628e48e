"""Classification of raw failures and the generic domain error mapper."""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Mapping, Optional, Type

import pydantic
from sqlalchemy import exc as sa_exc

from challengeforge.shared_kernel.context import OperationContext
from challengeforge.shared_kernel.exceptions import DomainException, ErrorKind

ErrorMapper = Callable[..., DomainException]

_NOT_FOUND_MARKERS = ("not found", "no rows", "does not exist")
_VALIDATION_MARKERS = ("validation", "invalid", "constraint", "violates")
_TRANSIENT_MARKERS = (
    "connection",
    "timeout",
    "timed out",
    "deadlock",
    "too many connections",
    "database is busy",
    "database is locked",
    "lock wait timeout",
    "server closed",
    "rate limit",
    "temporarily unavailable",
    "could not serialize",
)


def classify_error(error: BaseException) -> ErrorKind:
    """Return the taxonomy kind for any caught error."""
    if isinstance(error, DomainException):
        return error.kind
    if isinstance(error, pydantic.ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, (sa_exc.NoResultFound,)):
        return ErrorKind.NOT_FOUND
    if isinstance(error, (sa_exc.IntegrityError, sa_exc.DataError)):
        return ErrorKind.VALIDATION
    if isinstance(error, (sa_exc.DBAPIError, sa_exc.TimeoutError, sa_exc.DisconnectionError)):
        return ErrorKind.PERSISTENCE
    if isinstance(error, (asyncio.TimeoutError, ConnectionError, OSError)):
        return ErrorKind.PERSISTENCE

    message = str(error).lower()
    if any(marker in message for marker in _NOT_FOUND_MARKERS):
        return ErrorKind.NOT_FOUND
    if any(marker in message for marker in _VALIDATION_MARKERS):
        return ErrorKind.VALIDATION
    return ErrorKind.GENERIC


def is_transient_error(error: BaseException) -> bool:
    """Default retry predicate: network, timeout and lock-conflict failures."""
    if isinstance(error, DomainException):
        return error.transient
    if isinstance(error, (sa_exc.IntegrityError, sa_exc.DataError, sa_exc.NoResultFound)):
        return False
    if isinstance(error, pydantic.ValidationError):
        return False
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return True
    if isinstance(
        error,
        (
            sa_exc.OperationalError,
            sa_exc.InterfaceError,
            sa_exc.DisconnectionError,
            sa_exc.TimeoutError,
            asyncio.TimeoutError,
            ConnectionError,
        ),
    ):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


class DomainErrorMapper:
    """Converts any caught error into one domain's error family.

    Calling the mapper never raises; it always returns an exception
    instance. Errors that already belong to ``default_error_class`` pass
    through untouched.
    """

    def __init__(
        self,
        mappings: Mapping[ErrorKind, Type[DomainException]],
        default_error_class: Type[DomainException],
    ) -> None:
        self.mappings: Dict[ErrorKind, Type[DomainException]] = dict(mappings)
        self.default_error_class = default_error_class

    def __call__(self, error: BaseException, context: Optional[OperationContext] = None) -> DomainException:
        if isinstance(error, self.default_error_class):
            if context is not None and error.context is None:
                error.context = context
            return error

        kind = classify_error(error)
        message = _message_for(error, context)
        if isinstance(error, DomainException):
            cause: Optional[BaseException] = error.cause if error.cause is not None else error
            metadata: Dict[str, Any] = dict(error.metadata)
        else:
            cause = error
            metadata = {}
        if context is not None:
            metadata = {**context.metadata, **metadata}
        transient = is_transient_error(error)

        error_class = self.mappings.get(kind, self.default_error_class)
        for candidate in (error_class, self.default_error_class, DomainException):
            try:
                return candidate(
                    message,
                    cause=cause,
                    metadata=metadata,
                    context=context,
                    transient=transient,
                )
            except Exception:  # noqa: BLE001 - a broken constructor must not escape the mapper
                continue
        return DomainException(message)


def create_error_mapper(
    mappings: Mapping[ErrorKind, Type[DomainException]],
    default_error_class: Type[DomainException],
) -> ErrorMapper:
    return DomainErrorMapper(mappings, default_error_class)


def _message_for(error: BaseException, context: Optional[OperationContext]) -> str:
    message = getattr(error, "message", None) or str(error)
    if message:
        return message
    if context is not None:
        return f"{context.domain_name} {context.operation_name} failed"
    return f"{type(error).__name__} raised"
