"""Personality bounded context."""
