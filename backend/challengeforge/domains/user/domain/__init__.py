"""User domain types."""

from .entities import User
from .errors import UserError, UserNotFoundError, UserValidationError, UserPersistenceError
from .events import UserEvents

__all__ = [
    "User",
    "UserError",
    "UserNotFoundError",
    "UserValidationError",
    "UserPersistenceError",
    "UserEvents",
]
