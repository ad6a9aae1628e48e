"""Focus area record and search schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from challengeforge.shared_kernel.schemas import DomainFilters, DomainRecord, FilterValue


class FocusAreaRecord(DomainRecord):
    id: Optional[str] = None
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    priority: int = Field(ge=1)
    active: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class FocusAreaFilters(DomainFilters):
    user_id: FilterValue[str] = None
    name: FilterValue[str] = None
    active: FilterValue[bool] = None
