"""Pydantic records for defaults, image configs and targets."""
