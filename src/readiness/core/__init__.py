"""Shared infrastructure: validation, persistence and API schemas."""
