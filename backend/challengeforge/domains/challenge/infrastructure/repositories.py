"""Challenge repository."""
from __future__ import annotations

from typing import List

from challengeforge.infrastructure.errors import create_error_mapper
from challengeforge.infrastructure.persistence.repository import BaseRepository
from challengeforge.shared_kernel.exceptions import ErrorKind
from challengeforge.domains.challenge.domain.entities import Challenge
from challengeforge.domains.challenge.domain.errors import (
    ChallengeError,
    ChallengeNotFoundError,
    ChallengePersistenceError,
    ChallengeValidationError,
)
from challengeforge.domains.challenge.domain.schemas import ChallengeFilters, ChallengeRecord
from .mappers import ChallengeMapper

map_challenge_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: ChallengeNotFoundError,
        ErrorKind.VALIDATION: ChallengeValidationError,
        ErrorKind.PERSISTENCE: ChallengePersistenceError,
    },
    ChallengeError,
)


class ChallengeRepository(BaseRepository[Challenge]):
    table_name = "challenges"
    domain_name = "challenge"
    entity_type = Challenge
    mapper = ChallengeMapper()
    schema = ChallengeRecord
    filter_schema = ChallengeFilters
    error_mapper = map_challenge_error
    sortable_fields = frozenset({"createdAt", "updatedAt", "score", "title"})

    async def find_by_user_email(self, user_email: str, limit: int = 10) -> List[Challenge]:
        return await self.find_by_filter({"userEmail": user_email}, {"limit": limit})
