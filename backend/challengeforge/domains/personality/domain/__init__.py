"""Personality domain types."""

from .entities import Personality
from .errors import (
    PersonalityError,
    PersonalityNotFoundError,
    PersonalityValidationError,
    PersonalityPersistenceError,
)
from .events import PersonalityEvents

__all__ = [
    "Personality",
    "PersonalityError",
    "PersonalityNotFoundError",
    "PersonalityValidationError",
    "PersonalityPersistenceError",
    "PersonalityEvents",
]
