"""Infrastructure layer (errors, resilience, events, persistence, DI)."""
