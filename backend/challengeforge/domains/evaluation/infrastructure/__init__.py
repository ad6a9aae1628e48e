"""Evaluation persistence adapters."""

from .mappers import EvaluationMapper
from .repositories import EvaluationRepository, map_evaluation_error

__all__ = ["EvaluationMapper", "EvaluationRepository", "map_evaluation_error"]
