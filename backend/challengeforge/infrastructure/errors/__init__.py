"""Error classification and domain error mapping."""

from .mapping import (
    DomainErrorMapper,
    ErrorMapper,
    classify_error,
    create_error_mapper,
    is_transient_error,
)

__all__ = [
    "DomainErrorMapper",
    "ErrorMapper",
    "classify_error",
    "create_error_mapper",
    "is_transient_error",
]
