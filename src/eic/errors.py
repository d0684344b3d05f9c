"""
Exception hierarchy for the checker.

Every error raised by a pipeline stage derives from CheckerError so the CLI
can turn it into a non-zero exit without catching unrelated exceptions.
"""
from typing import Optional


class CheckerError(Exception):
    """Base class for all checker failures."""


class ConfigIOError(CheckerError):
    """A configuration file could not be read."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message} ({path})")
        self.path = path


class ConfigParseError(CheckerError):
    """A configuration file is not valid YAML or has the wrong shape."""

    def __init__(self, path: str, message: str):
        super().__init__(f"parsing YAML file ({path}): {message}")
        self.path = path


class ConfigValidationError(CheckerError):
    """A resolved image config breaks one of its invariants."""

    def __init__(self, path: str, field: str, message: str):
        super().__init__(message)
        self.path = path
        self.field = field


class RemoteCheckError(CheckerError):
    """Credential exchange or tag listing failed for a repository."""

    def __init__(self, repository: str, message: str, target: Optional[str] = None):
        detail = f"{message} for {repository}"
        if target:
            detail = f"{detail} ({target})"
        super().__init__(detail)
        self.repository = repository
        self.target = target
