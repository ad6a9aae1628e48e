"""User error family."""
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)


class UserError(DomainException):
    domain = "user"


class UserNotFoundError(UserError, EntityNotFoundError):
    pass


class UserValidationError(UserError, ValidationError):
    pass


class UserPersistenceError(UserError, PersistenceError):
    pass
