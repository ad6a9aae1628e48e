"""Focus area aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from challengeforge.shared_kernel.entity import AggregateRoot, utc_now
from .errors import FocusAreaValidationError
from .events import FocusAreaEvents

UPDATABLE_FIELDS = frozenset({"name", "description", "priority", "active", "metadata"})


@dataclass
class FocusArea(AggregateRoot):
    user_id: str = ""
    name: str = ""
    description: str = ""
    priority: int = 1
    active: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def update(self, **changes: Any) -> None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise FocusAreaValidationError(
                f"Cannot update focus area fields: {', '.join(sorted(unknown))}",
                metadata={"fields": sorted(unknown)},
            )
        if "priority" in changes:
            self.change_priority(changes.pop("priority"))
        active = changes.pop("active", None)
        if active is False:
            self.deactivate()
        elif active is True:
            self.active = True
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = utc_now()

    def change_priority(self, priority: int) -> None:
        if not isinstance(priority, int) or priority < 1:
            raise FocusAreaValidationError("Priority must be a positive integer", metadata={"priority": priority})
        if priority == self.priority:
            return
        previous = self.priority
        self.priority = priority
        self.record_event(
            FocusAreaEvents.PRIORITY_CHANGED,
            focusAreaId=self.id,
            previousPriority=previous,
            newPriority=priority,
        )

    def deactivate(self) -> None:
        if not self.active:
            return
        self.active = False
        self.record_event(FocusAreaEvents.DEACTIVATED, focusAreaId=self.id, userId=self.user_id)
