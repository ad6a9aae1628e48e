"""Focus area repository."""
from __future__ import annotations

from typing import List

from challengeforge.infrastructure.errors import create_error_mapper
from challengeforge.infrastructure.persistence.repository import BaseRepository
from challengeforge.shared_kernel.exceptions import ErrorKind
from challengeforge.domains.focus_area.domain.entities import FocusArea
from challengeforge.domains.focus_area.domain.errors import (
    FocusAreaError,
    FocusAreaNotFoundError,
    FocusAreaPersistenceError,
    FocusAreaValidationError,
)
from challengeforge.domains.focus_area.domain.schemas import FocusAreaFilters, FocusAreaRecord
from .mappers import FocusAreaMapper

map_focus_area_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: FocusAreaNotFoundError,
        ErrorKind.VALIDATION: FocusAreaValidationError,
        ErrorKind.PERSISTENCE: FocusAreaPersistenceError,
    },
    FocusAreaError,
)


class FocusAreaRepository(BaseRepository[FocusArea]):
    table_name = "focus_areas"
    domain_name = "focus_area"
    entity_type = FocusArea
    mapper = FocusAreaMapper()
    schema = FocusAreaRecord
    filter_schema = FocusAreaFilters
    error_mapper = map_focus_area_error
    sortable_fields = frozenset({"createdAt", "updatedAt", "priority", "name"})

    async def find_by_user_id(self, user_id: str, active_only: bool = False) -> List[FocusArea]:
        filters = {"userId": user_id}
        if active_only:
            filters["active"] = True
        return await self.find_by_filter(filters, {"sortBy": "priority", "sortDir": "asc", "limit": 100})
