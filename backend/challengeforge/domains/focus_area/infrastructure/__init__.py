"""Focus area persistence adapters."""

from .mappers import FocusAreaMapper
from .repositories import FocusAreaRepository, map_focus_area_error

__all__ = ["FocusAreaMapper", "FocusAreaRepository", "map_focus_area_error"]
