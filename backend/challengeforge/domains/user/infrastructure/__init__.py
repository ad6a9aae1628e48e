"""User persistence adapters."""

from .mappers import UserMapper
from .repositories import UserRepository, map_user_error

__all__ = ["UserMapper", "UserRepository", "map_user_error"]
