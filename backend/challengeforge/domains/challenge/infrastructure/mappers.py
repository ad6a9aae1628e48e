"""Challenge entity <-> record mapping."""
from __future__ import annotations

from typing import Any, Dict

from challengeforge.shared_kernel.entity import EntityMapper, parse_datetime, utc_now
from challengeforge.domains.challenge.domain.entities import Challenge, ChallengeStatus


class ChallengeMapper(EntityMapper[Challenge]):
    def to_domain(self, record: Dict[str, Any]) -> Challenge:
        return Challenge(
            id=record.get("id"),
            user_email=record["userEmail"],
            user_id=record.get("userId"),
            title=record.get("title") or "",
            focus_area=record.get("focusArea") or "",
            content=dict(record.get("content") or {}),
            challenge_type=record.get("challengeType") or "standard",
            format_type=record.get("formatType") or "open-ended",
            difficulty=record.get("difficulty") or "intermediate",
            status=ChallengeStatus(record.get("status") or ChallengeStatus.PENDING.value),
            evaluation_criteria=list(record.get("evaluationCriteria") or []),
            responses=list(record.get("responses") or []),
            evaluation=record.get("evaluation"),
            score=float(record.get("score") or 0),
            created_at=parse_datetime(record.get("createdAt")) or utc_now(),
            updated_at=parse_datetime(record.get("updatedAt")) or utc_now(),
        )

    def to_persistence(self, entity: Challenge) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "userEmail": entity.user_email,
            "userId": entity.user_id,
            "title": entity.title,
            "focusArea": entity.focus_area,
            "content": dict(entity.content),
            "challengeType": entity.challenge_type,
            "formatType": entity.format_type,
            "difficulty": entity.difficulty,
            "status": entity.status.value,
            "evaluationCriteria": list(entity.evaluation_criteria),
            "responses": list(entity.responses),
            "evaluation": entity.evaluation,
            "score": entity.score,
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
