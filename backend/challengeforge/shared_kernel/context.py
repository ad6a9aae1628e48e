"""Per-call operation context attached to errors and log lines."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True, eq=False)
class OperationContext:
    """Identifies one repository or service call.

    Compared and hashed by identity; ``metadata`` is a read-only view.
    """

    operation_name: str
    domain_name: str = "generic"
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def with_metadata(self, **extra: Any) -> "OperationContext":
        return OperationContext(
            operation_name=self.operation_name,
            domain_name=self.domain_name,
            metadata={**self.metadata, **extra},
        )

    def as_log_fields(self) -> Dict[str, Any]:
        # Metadata stays nested; log calls add their own top-level fields.
        fields: Dict[str, Any] = {"operation": self.operation_name, "domain": self.domain_name}
        if self.metadata:
            fields["context"] = dict(self.metadata)
        return fields
