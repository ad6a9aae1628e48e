"""Evaluation aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from challengeforge.shared_kernel.entity import AggregateRoot, utc_now
from .errors import EvaluationValidationError
from .events import EvaluationEvents

UPDATABLE_FIELDS = frozenset(
    {"score", "category_scores", "overall_feedback", "strengths", "areas_for_improvement", "next_steps"}
)


@dataclass
class Evaluation(AggregateRoot):
    """AI feedback on one challenge attempt."""

    challenge_id: str = ""
    user_email: str = ""
    score: float = 0.0
    overall_feedback: str = ""
    category_scores: Dict[str, float] = field(default_factory=dict)
    strengths: List[str] = field(default_factory=list)
    areas_for_improvement: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_feedback(cls, challenge_id: str, user_email: str, feedback: Dict[str, Any]) -> "Evaluation":
        """Build an evaluation from the provider's JSON feedback document."""
        try:
            score = float(feedback.get("score", 0))
        except (TypeError, ValueError):
            raise EvaluationValidationError(
                "Evaluation score must be a number", metadata={"score": feedback.get("score")}
            ) from None
        return cls(
            challenge_id=challenge_id,
            user_email=user_email,
            score=score,
            overall_feedback=str(feedback.get("overallFeedback") or feedback.get("feedback") or ""),
            category_scores=dict(feedback.get("categoryScores") or {}),
            strengths=list(feedback.get("strengths") or []),
            areas_for_improvement=list(feedback.get("areasForImprovement") or []),
            next_steps=list(feedback.get("nextSteps") or []),
        )

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise EvaluationValidationError(
                f"Cannot update evaluation fields: {', '.join(sorted(unknown))}",
                metadata={"fields": sorted(unknown)},
            )
        previous_score = self.score
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = utc_now()
        if "score" in changes and changes["score"] != previous_score:
            self.record_event(
                EvaluationEvents.SCORE_ADJUSTED,
                evaluationId=self.id,
                previousScore=previous_score,
                newScore=self.score,
            )
