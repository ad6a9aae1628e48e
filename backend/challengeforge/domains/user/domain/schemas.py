"""User record and search schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import Field

from challengeforge.shared_kernel.schemas import DomainFilters, DomainRecord, FilterValue

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRecord(DomainRecord):
    id: Optional[str] = None
    email: str = Field(pattern=EMAIL_PATTERN)
    full_name: str = Field(default="", max_length=200)
    professional_title: str = ""
    skill_level: str = "beginner"
    focus_area: Optional[str] = None
    preferences: Dict[str, Any] = Field(default_factory=dict)
    status: Literal["active", "inactive"] = "active"
    onboarding_completed: bool = False
    last_active: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserFilters(DomainFilters):
    email: FilterValue[str] = None
    status: FilterValue[Literal["active", "inactive"]] = None
    focus_area: FilterValue[str] = None
    skill_level: FilterValue[str] = None
