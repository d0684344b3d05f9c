"""Calculation of fields derived from resolved configs."""
