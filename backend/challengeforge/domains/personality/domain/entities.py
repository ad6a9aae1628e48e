"""Personality profile aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from challengeforge.shared_kernel.entity import AggregateRoot, utc_now
from .errors import PersonalityValidationError
from .events import PersonalityEvents

UPDATABLE_FIELDS = frozenset({"personality_traits", "ai_attitudes", "insights"})
DOMINANT_TRAIT_THRESHOLD = 70


@dataclass
class Personality(AggregateRoot):
    user_id: str = ""
    personality_traits: Dict[str, float] = field(default_factory=dict)
    ai_attitudes: Dict[str, float] = field(default_factory=dict)
    dominant_traits: List[str] = field(default_factory=list)
    insights: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise PersonalityValidationError(
                f"Cannot update personality fields: {', '.join(sorted(unknown))}",
                metadata={"fields": sorted(unknown)},
            )
        if "personality_traits" in changes:
            self.update_traits(changes.pop("personality_traits"))
        if "insights" in changes:
            self.record_insights(changes.pop("insights"))
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = utc_now()

    def update_traits(self, traits: Dict[str, float]) -> None:
        for name, score in traits.items():
            if not isinstance(score, (int, float)) or not 0 <= score <= 100:
                raise PersonalityValidationError(
                    f"Trait score for {name} must be between 0 and 100", metadata={"trait": name}
                )
        self.personality_traits = {**self.personality_traits, **traits}
        self.dominant_traits = sorted(
            name for name, score in self.personality_traits.items() if score >= DOMINANT_TRAIT_THRESHOLD
        )
        self.record_event(
            PersonalityEvents.TRAITS_UPDATED,
            personalityId=self.id,
            userId=self.user_id,
            dominantTraits=list(self.dominant_traits),
        )

    def record_insights(self, insights: Dict[str, Any]) -> None:
        self.insights = dict(insights)
        self.record_event(PersonalityEvents.INSIGHTS_GENERATED, personalityId=self.id, userId=self.user_id)
