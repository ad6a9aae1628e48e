"""Challenge aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from challengeforge.shared_kernel.entity import AggregateRoot, utc_now
from .errors import ChallengeValidationError
from .events import ChallengeEvents


class ChallengeStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    EVALUATED = "evaluated"
    COMPLETED = "completed"
    ARCHIVED = "archived"


UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "content",
        "focus_area",
        "challenge_type",
        "format_type",
        "difficulty",
        "status",
        "evaluation_criteria",
    }
)


@dataclass
class Challenge(AggregateRoot):
    """A generated exercise answered by one user."""

    user_email: str = ""
    title: str = ""
    focus_area: str = ""
    content: Dict[str, Any] = field(default_factory=dict)
    challenge_type: str = "standard"
    format_type: str = "open-ended"
    difficulty: str = "intermediate"
    status: ChallengeStatus = ChallengeStatus.PENDING
    evaluation_criteria: List[str] = field(default_factory=list)
    responses: List[Dict[str, Any]] = field(default_factory=list)
    evaluation: Optional[Dict[str, Any]] = None
    score: float = 0.0
    user_id: Optional[str] = None
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        user_email: str,
        title: str,
        focus_area: str,
        content: Optional[Dict[str, Any]] = None,
        **attributes: Any,
    ) -> "Challenge":
        if not user_email or "@" not in user_email:
            raise ChallengeValidationError("A challenge needs a valid user email", metadata={"userEmail": user_email})
        if not title:
            raise ChallengeValidationError("A challenge needs a title")
        return cls(
            user_email=user_email,
            title=title,
            focus_area=focus_area,
            content=dict(content or {}),
            **attributes,
        )

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ChallengeValidationError(
                f"Cannot update challenge fields: {', '.join(sorted(unknown))}",
                metadata={"fields": sorted(unknown)},
            )
        status = changes.pop("status", None)
        for name, value in changes.items():
            setattr(self, name, value)
        if status is not None:
            self.update_status(status)
        self.updated_at = utc_now()

    def update_status(self, new_status: Union[ChallengeStatus, str]) -> None:
        try:
            status = ChallengeStatus(new_status)
        except ValueError:
            raise ChallengeValidationError(
                f"Unknown challenge status: {new_status}", metadata={"status": new_status}
            ) from None
        if status == self.status:
            return
        previous = self.status
        self.status = status
        self.updated_at = utc_now()
        self.record_event(
            ChallengeEvents.STATUS_CHANGED,
            challengeId=self.id,
            previousStatus=previous.value,
            newStatus=status.value,
        )

    def submit_responses(self, responses: Union[Dict[str, Any], List[Dict[str, Any]]]) -> None:
        if isinstance(responses, dict):
            responses = [responses]
        self.responses = [*self.responses, *responses]
        self.update_status(ChallengeStatus.SUBMITTED)
        self.record_event(
            ChallengeEvents.RESPONSES_SUBMITTED,
            challengeId=self.id,
            responseCount=len(self.responses),
        )

    def complete(self, evaluation: Dict[str, Any]) -> None:
        self.evaluation = dict(evaluation)
        self.score = float(evaluation.get("score", 0) or 0)
        self.update_status(ChallengeStatus.EVALUATED)
        self.record_event(ChallengeEvents.COMPLETED, challengeId=self.id, score=self.score)

    def is_completed(self) -> bool:
        return self.status in (ChallengeStatus.EVALUATED, ChallengeStatus.COMPLETED)
