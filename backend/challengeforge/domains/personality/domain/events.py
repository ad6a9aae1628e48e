"""Personality event types."""


class PersonalityEvents:
    CREATED = "personality.created"
    DELETED = "personality.deleted"
    TRAITS_UPDATED = "personality.traits_updated"
    INSIGHTS_GENERATED = "personality.insights_generated"
