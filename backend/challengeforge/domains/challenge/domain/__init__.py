"""Challenge domain types."""

from .entities import Challenge, ChallengeStatus
from .errors import (
    ChallengeError,
    ChallengeNotFoundError,
    ChallengeValidationError,
    ChallengePersistenceError,
)
from .events import ChallengeEvents

__all__ = [
    "Challenge",
    "ChallengeStatus",
    "ChallengeError",
    "ChallengeNotFoundError",
    "ChallengeValidationError",
    "ChallengePersistenceError",
    "ChallengeEvents",
]
