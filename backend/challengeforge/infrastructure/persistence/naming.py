"""Field-name translation between domain (camelCase) and storage (snake_case) records."""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping

_UPPER = re.compile(r"(?<!^)([A-Z])")
_UNDERSCORE_LETTER = re.compile(r"_([a-z0-9])")


def camel_to_snake(name: str) -> str:
    return _UPPER.sub(lambda match: "_" + match.group(1), name).lower()


def snake_to_camel(name: str) -> str:
    return _UNDERSCORE_LETTER.sub(lambda match: match.group(1).upper(), name)


# Only top-level keys are renamed; nested values (JSON columns) are opaque.
def to_storage_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    return {camel_to_snake(key): value for key, value in record.items()}


def to_domain_record(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {snake_to_camel(key): value for key, value in row.items()}
