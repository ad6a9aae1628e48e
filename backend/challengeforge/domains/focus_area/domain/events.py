"""Focus area event types."""


class FocusAreaEvents:
    CREATED = "focus_area.created"
    DELETED = "focus_area.deleted"
    PRIORITY_CHANGED = "focus_area.priority_changed"
    DEACTIVATED = "focus_area.deactivated"
