"""Conversion of check results into the build manifest."""
