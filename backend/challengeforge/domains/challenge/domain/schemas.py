"""Challenge record and search schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from challengeforge.shared_kernel.schemas import DomainFilters, DomainRecord, FilterValue
from .entities import ChallengeStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ChallengeRecord(DomainRecord):
    id: Optional[str] = None
    user_email: str = Field(pattern=EMAIL_PATTERN)
    user_id: Optional[str] = None
    title: str = Field(min_length=1, max_length=200)
    focus_area: str = Field(min_length=1)
    content: Dict[str, Any] = Field(default_factory=dict)
    challenge_type: str = Field(min_length=1)
    format_type: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    status: ChallengeStatus
    evaluation_criteria: List[str] = Field(default_factory=list)
    responses: List[Dict[str, Any]] = Field(default_factory=list)
    evaluation: Optional[Dict[str, Any]] = None
    score: float = Field(default=0, ge=0, le=100)
    created_at: datetime
    updated_at: datetime


class ChallengeFilters(DomainFilters):
    user_email: FilterValue[str] = None
    user_id: FilterValue[str] = None
    focus_area: FilterValue[str] = None
    challenge_type: FilterValue[str] = None
    difficulty: FilterValue[str] = None
    status: FilterValue[ChallengeStatus] = None
