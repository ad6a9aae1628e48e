"""User repository."""
from __future__ import annotations

from typing import Any, Dict, Optional

from challengeforge.infrastructure.errors import create_error_mapper
from challengeforge.infrastructure.persistence.repository import BaseRepository
from challengeforge.shared_kernel.exceptions import ErrorKind
from challengeforge.domains.user.domain.entities import User
from challengeforge.domains.user.domain.errors import (
    UserError,
    UserNotFoundError,
    UserPersistenceError,
    UserValidationError,
)
from challengeforge.domains.user.domain.schemas import UserFilters, UserRecord
from .mappers import UserMapper

map_user_error = create_error_mapper(
    {
        ErrorKind.NOT_FOUND: UserNotFoundError,
        ErrorKind.VALIDATION: UserValidationError,
        ErrorKind.PERSISTENCE: UserPersistenceError,
    },
    UserError,
)


class UserRepository(BaseRepository[User]):
    table_name = "users"
    domain_name = "user"
    entity_type = User
    mapper = UserMapper()
    schema = UserRecord
    filter_schema = UserFilters
    error_mapper = map_user_error
    sortable_fields = frozenset({"createdAt", "updatedAt", "email", "fullName", "lastActive"})

    async def find_by_email(self, email: str, throw_if_not_found: bool = False) -> Optional[User]:
        users = await self.find_by_filter({"email": email.strip().lower()}, {"limit": 1})
        if users:
            return users[0]
        if throw_if_not_found:
            raise UserNotFoundError(f"User with email {email} not found", metadata={"email": email})
        return None

    def created_event_payload(self, entity: User) -> Dict[str, Any]:
        # Preferences may hold personal settings; keep them off the bus.
        return {"userId": entity.id, "email": entity.email, "fullName": entity.full_name}
