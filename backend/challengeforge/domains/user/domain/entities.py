"""User aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from challengeforge.shared_kernel.entity import AggregateRoot, utc_now
from .errors import UserValidationError
from .events import UserEvents

UPDATABLE_FIELDS = frozenset(
    {"full_name", "professional_title", "skill_level", "focus_area", "preferences", "status"}
)


@dataclass
class User(AggregateRoot):
    email: str = ""
    full_name: str = ""
    professional_title: str = ""
    skill_level: str = "beginner"
    focus_area: Optional[str] = None
    preferences: Dict[str, Any] = field(default_factory=dict)
    status: str = "active"
    onboarding_completed: bool = False
    last_active: Optional[datetime] = None
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, email: str, full_name: str = "", **attributes: Any) -> "User":
        if not email or "@" not in email:
            raise UserValidationError("A user needs a valid email", metadata={"email": email})
        return cls(email=email.strip().lower(), full_name=full_name, **attributes)

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise UserValidationError(
                f"Cannot update user fields: {', '.join(sorted(unknown))}",
                metadata={"fields": sorted(unknown)},
            )
        if "focus_area" in changes:
            self.set_focus_area(changes.pop("focus_area"))
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = utc_now()

    def set_focus_area(self, focus_area: Optional[str]) -> None:
        if focus_area == self.focus_area:
            return
        previous = self.focus_area
        self.focus_area = focus_area
        self.record_event(
            UserEvents.FOCUS_AREA_SET,
            userId=self.id,
            previousFocusArea=previous,
            focusArea=focus_area,
        )

    def complete_onboarding(self) -> None:
        if self.onboarding_completed:
            return
        self.onboarding_completed = True
        self.updated_at = utc_now()
        self.record_event(UserEvents.ONBOARDING_COMPLETED, userId=self.id, email=self.email)

    def record_activity(self) -> None:
        self.last_active = utc_now()
        self.updated_at = self.last_active
