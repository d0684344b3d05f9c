"""Merging of defaults into per-image configs."""
