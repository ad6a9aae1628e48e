"""Domain modules built on the repository base."""
