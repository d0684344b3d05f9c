"""Invariant checks on resolved image configs."""
