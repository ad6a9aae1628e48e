"""Personality persistence adapters."""

from .mappers import PersonalityMapper
from .repositories import PersonalityRepository, map_personality_error

__all__ = ["PersonalityMapper", "PersonalityRepository", "map_personality_error"]
