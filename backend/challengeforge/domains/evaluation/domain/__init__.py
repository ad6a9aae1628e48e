"""Evaluation domain types."""

from .entities import Evaluation
from .errors import (
    EvaluationError,
    EvaluationNotFoundError,
    EvaluationValidationError,
    EvaluationPersistenceError,
)
from .events import EvaluationEvents

__all__ = [
    "Evaluation",
    "EvaluationError",
    "EvaluationNotFoundError",
    "EvaluationValidationError",
    "EvaluationPersistenceError",
    "EvaluationEvents",
]
