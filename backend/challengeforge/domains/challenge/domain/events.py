"""Challenge event types."""


class ChallengeEvents:
    CREATED = "challenge.created"
    DELETED = "challenge.deleted"
    STATUS_CHANGED = "challenge.status_changed"
    RESPONSES_SUBMITTED = "challenge.responses_submitted"
    COMPLETED = "challenge.completed"
