"""Personality record and search schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from challengeforge.shared_kernel.schemas import DomainFilters, DomainRecord, FilterValue


class PersonalityRecord(DomainRecord):
    id: Optional[str] = None
    user_id: str = Field(min_length=1)
    personality_traits: Dict[str, float] = Field(default_factory=dict)
    ai_attitudes: Dict[str, float] = Field(default_factory=dict)
    dominant_traits: List[str] = Field(default_factory=list)
    insights: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class PersonalityFilters(DomainFilters):
    user_id: FilterValue[str] = None
