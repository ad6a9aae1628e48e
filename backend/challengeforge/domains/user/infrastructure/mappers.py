"""User entity <-> record mapping."""
from __future__ import annotations

from typing import Any, Dict

from challengeforge.shared_kernel.entity import EntityMapper, parse_datetime, utc_now
from challengeforge.domains.user.domain.entities import User


class UserMapper(EntityMapper[User]):
    def to_domain(self, record: Dict[str, Any]) -> User:
        return User(
            id=record.get("id"),
            email=record["email"],
            full_name=record.get("fullName") or "",
            professional_title=record.get("professionalTitle") or "",
            skill_level=record.get("skillLevel") or "beginner",
            focus_area=record.get("focusArea"),
            preferences=dict(record.get("preferences") or {}),
            status=record.get("status") or "active",
            onboarding_completed=bool(record.get("onboardingCompleted")),
            last_active=parse_datetime(record.get("lastActive")),
            created_at=parse_datetime(record.get("createdAt")) or utc_now(),
            updated_at=parse_datetime(record.get("updatedAt")) or utc_now(),
        )

    def to_persistence(self, entity: User) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "email": entity.email,
            "fullName": entity.full_name,
            "professionalTitle": entity.professional_title,
            "skillLevel": entity.skill_level,
            "focusArea": entity.focus_area,
            "preferences": dict(entity.preferences),
            "status": entity.status,
            "onboardingCompleted": entity.onboarding_completed,
            "lastActive": entity.last_active,
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
