"""Challenge bounded context."""
