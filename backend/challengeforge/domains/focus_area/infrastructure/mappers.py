"""Focus area entity <-> record mapping."""
from __future__ import annotations

from typing import Any, Dict

from challengeforge.shared_kernel.entity import EntityMapper, parse_datetime, utc_now
from challengeforge.domains.focus_area.domain.entities import FocusArea


class FocusAreaMapper(EntityMapper[FocusArea]):
    def to_domain(self, record: Dict[str, Any]) -> FocusArea:
        return FocusArea(
            id=record.get("id"),
            user_id=record["userId"],
            name=record["name"],
            description=record.get("description") or "",
            priority=int(record.get("priority") or 1),
            active=bool(record.get("active", True)),
            metadata=dict(record.get("metadata") or {}),
            created_at=parse_datetime(record.get("createdAt")) or utc_now(),
            updated_at=parse_datetime(record.get("updatedAt")) or utc_now(),
        )

    def to_persistence(self, entity: FocusArea) -> Dict[str, Any]:
        return {
            "id": entity.id,
            "userId": entity.user_id,
            "name": entity.name,
            "description": entity.description,
            "priority": entity.priority,
            "active": entity.active,
            "metadata": dict(entity.metadata),
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
        }
