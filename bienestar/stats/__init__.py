"""Coordinator-facing aggregate statistics."""
