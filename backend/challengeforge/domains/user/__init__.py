"""User bounded context."""
