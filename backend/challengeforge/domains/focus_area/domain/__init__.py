"""Focus area domain types."""

from .entities import FocusArea
from .errors import (
    FocusAreaError,
    FocusAreaNotFoundError,
    FocusAreaValidationError,
    FocusAreaPersistenceError,
)
from .events import FocusAreaEvents

__all__ = [
    "FocusArea",
    "FocusAreaError",
    "FocusAreaNotFoundError",
    "FocusAreaValidationError",
    "FocusAreaPersistenceError",
    "FocusAreaEvents",
]
