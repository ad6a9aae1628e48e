"""Personality repository."""
from __future__ import annotations

from typing import Optional

from challengeforge.infrastructure.errors import create_error_mapper
from challengeforge.infrastructure.persistence.repository import BaseRepository
from challengeforge.shared_kernel.exceptions import ErrorKind
from challengeforge.domains.personality.domain.entities import Personality
from challengeforge.domains.personality.domain.errors import (
    PersonalityError,
    PersonalityNotFoundError,
    PersonalityPersistenceError,
    PersonalityValidationError,
)
from challengeforge.domains.personality.domain.schemas import PersonalityFilters, PersonalityRecord
from .mappers import PersonalityMapper

map_personality_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: PersonalityNotFoundError,
        ErrorKind.VALIDATION: PersonalityValidationError,
        ErrorKind.PERSISTENCE: PersonalityPersistenceError,
    },
    PersonalityError,
)


class PersonalityRepository(BaseRepository[Personality]):
    table_name = "personality_profiles"
    domain_name = "personality"
    entity_type = Personality
    mapper = PersonalityMapper()
    schema = PersonalityRecord
    filter_schema = PersonalityFilters
    error_mapper = map_personality_error

    async def find_by_user_id(self, user_id: str) -> Optional[Personality]:
        profiles = await self.find_by_filter({"userId": user_id}, {"limit": 1})
        return profiles[0] if profiles else None
