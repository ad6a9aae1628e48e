"""Evaluation entity <-> record mapping."""
from __future__ import annotations

from typing import Any, Dict

from challengeforge.shared_kernel.entity import EntityMapper, parse_datetime, utc_now
from challengeforge.domains.evaluation.domain.entities import Evaluation


class EvaluationMapper(EntityMapper[Evaluation]):
    def to_domain(self, record: Dict[str, Any]) -> Evaluation:
        return Evaluation(
            id=record.get("id"),
            challenge_id=record["challengeId"],
            user_email=record.get("userEmail") or "",
            score=float(record.get("score") or 0),
            overall_feedback=record.get("overallFeedback") or "",
            category_scores=dict(record.get("categoryScores") or {}),
            strengths=list(record.get("strengths") or []),
            areas_for_improvement=list(record.get("areasForImprovement") or []),
            next_steps=list(record.get("nextSteps") or []),
            created_at=parse_datetime(record.get("createdAt")) or utc_now(),
            updated_at=parse_datetime(record.get("updatedAt")) or utc_now(),
        )

    def to_persistence(self, entity: Evaluation) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "challengeId": entity.challenge_id,
            "userEmail": entity.user_email,
            "score": entity.score,
            "overallFeedback": entity.overall_feedback,
            "categoryScores": dict(entity.category_scores),
            "strengths": list(entity.strengths),
            "areasForImprovement": list(entity.areas_for_improvement),
            "nextSteps": list(entity.next_steps),
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
