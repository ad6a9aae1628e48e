"""Challenge persistence adapters."""

from .mappers import ChallengeMapper
from .repositories import ChallengeRepository, map_challenge_error

__all__ = ["ChallengeMapper", "ChallengeRepository", "map_challenge_error"]
