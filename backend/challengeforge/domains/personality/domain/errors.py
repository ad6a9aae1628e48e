"""Personality error family."""
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)


class PersonalityError(DomainException):
    domain = "personality"


class PersonalityNotFoundError(PersonalityError, EntityNotFoundError):
    pass


class PersonalityValidationError(PersonalityError, ValidationError):
    pass


class PersonalityPersistenceError(PersonalityError, PersistenceError):
    pass
