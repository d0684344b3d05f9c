"""
Small helpers for optional string values read from YAML.
"""
from typing import Optional


def is_blank(value: Optional[str]) -> bool:
    """
    True when a value is absent, empty or whitespace only.

    Absent keys and empty strings both appear in config files and are
    treated the same way by validation.
    """
    return value is None or value.strip() == ""
