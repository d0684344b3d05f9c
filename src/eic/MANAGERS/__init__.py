"""Orchestration of a full check run."""
