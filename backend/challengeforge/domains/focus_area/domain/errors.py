"""Focus area error family."""
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)


class FocusAreaError(DomainException):
    domain = "focus_area"


class FocusAreaNotFoundError(FocusAreaError, EntityNotFoundError):
    pass


class FocusAreaValidationError(FocusAreaError, ValidationError):
    pass


class FocusAreaPersistenceError(FocusAreaError, PersistenceError):
    pass
