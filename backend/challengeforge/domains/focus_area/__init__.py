"""Focus area bounded context."""
