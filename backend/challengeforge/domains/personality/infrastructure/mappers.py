"""Personality entity <-> record mapping."""
from __future__ import annotations

from typing import Any, Dict

from challengeforge.shared_kernel.entity import EntityMapper, parse_datetime, utc_now
from challengeforge.domains.personality.domain.entities import Personality


class PersonalityMapper(EntityMapper[Personality]):
    def to_domain(self, record: Dict[str, Any]) -> Personality:
        return Personality(
            id=record.get("id"),
            user_id=record["userId"],
            personality_traits=dict(record.get("personalityTraits") or {}),
            ai_attitudes=dict(record.get("aiAttitudes") or {}),
            dominant_traits=list(record.get("dominantTraits") or []),
            insights=dict(record.get("insights") or {}),
            created_at=parse_datetime(record.get("createdAt")) or utc_now(),
            updated_at=parse_datetime(record.get("updatedAt")) or utc_now(),
        )

    def to_persistence(self, entity: Personality) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "userId": entity.user_id,
            "personalityTraits": dict(entity.personality_traits),
            "aiAttitudes": dict(entity.ai_attitudes),
            "dominantTraits": list(entity.dominant_traits),
            "insights": dict(entity.insights),
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
