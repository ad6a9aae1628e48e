"""Evaluation repository."""
from __future__ import annotations

from typing import List

from challengeforge.infrastructure.errors import create_error_mapper
from challengeforge.infrastructure.persistence.repository import BaseRepository
from challengeforge.shared_kernel.exceptions import ErrorKind
from challengeforge.domains.evaluation.domain.entities import Evaluation
from challengeforge.domains.evaluation.domain.errors import (
    EvaluationError,
    EvaluationNotFoundError,
    EvaluationPersistenceError,
    EvaluationValidationError,
)
from challengeforge.domains.evaluation.domain.schemas import EvaluationFilters, EvaluationRecord
from .mappers import EvaluationMapper

map_evaluation_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: EvaluationNotFoundError,
        ErrorKind.VALIDATION: EvaluationValidationError,
        ErrorKind.PERSISTENCE: EvaluationPersistenceError,
    },
    EvaluationError,
)


class EvaluationRepository(BaseRepository[Evaluation]):
    table_name = "evaluations"
    domain_name = "evaluation"
    entity_type = Evaluation
    mapper = EvaluationMapper()
    schema = EvaluationRecord
    filter_schema = EvaluationFilters
    error_mapper = map_evaluation_error
    sortable_fields = frozenset({"createdAt", "updatedAt", "score"})

    async def find_by_challenge_id(self, challenge_id: str) -> List[Evaluation]:
        return await self.find_by_filter({"challengeId": challenge_id})

    def created_event_payload(self, entity: Evaluation):
        return {
            "evaluationId": entity.id,
            "challengeId": entity.challenge_id,
            "userEmail": entity.user_email,
            "score": entity.score,
        }
