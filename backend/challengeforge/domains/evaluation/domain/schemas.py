"""Evaluation record and search schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from challengeforge.shared_kernel.schemas import DomainFilters, DomainRecord, FilterValue


class EvaluationRecord(DomainRecord):
    id: Optional[str] = None
    challenge_id: str = Field(min_length=1)
    user_email: str = Field(min_length=3)
    score: float = Field(ge=0, le=100)
    overall_feedback: str = Field(max_length=2000)
    category_scores: Dict[str, float] = Field(default_factory=dict)
    strengths: List[str] = Field(default_factory=list, max_length=10)
    areas_for_improvement: List[str] = Field(default_factory=list, max_length=10)
    next_steps: List[str] = Field(default_factory=list, max_length=5)
    created_at: datetime
    updated_at: datetime


class EvaluationFilters(DomainFilters):
    challenge_id: FilterValue[str] = None
    user_email: FilterValue[str] = None
