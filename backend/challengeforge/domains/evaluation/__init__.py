"""Evaluation bounded context."""
