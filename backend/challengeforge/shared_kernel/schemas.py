"""Pydantic base for domain-named (camelCase) records."""
from typing import List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# A list matches any of its values; an explicit None matches a missing value.
FilterValue = Optional[Union[T, List[T]]]


class DomainRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class DomainFilters(DomainRecord):
    """Search criteria; unknown keys are rejected."""

    model_config = ConfigDict(use_enum_values=True)
