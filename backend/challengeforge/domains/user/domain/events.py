"""User event types."""


class UserEvents:
    CREATED = "user.created"
    DELETED = "user.deleted"
    FOCUS_AREA_SET = "user.focus_area_set"
    ONBOARDING_COMPLETED = "user.onboarding_completed"
