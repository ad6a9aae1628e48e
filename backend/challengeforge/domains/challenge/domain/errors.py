"""Challenge error family."""
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)


class ChallengeError(DomainException):
    domain = "challenge"


class ChallengeNotFoundError(ChallengeError, EntityNotFoundError):
    pass


class ChallengeValidationError(ChallengeError, ValidationError):
    pass


class ChallengePersistenceError(ChallengeError, PersistenceError):
    pass
