"""Evaluation error family."""
from challengeforge.shared_kernel.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)


class EvaluationError(DomainException):
    domain = "evaluation"


class EvaluationNotFoundError(EvaluationError, EntityNotFoundError):
    pass


class EvaluationValidationError(EvaluationError, ValidationError):
    pass


class EvaluationPersistenceError(EvaluationError, PersistenceError):
    pass
