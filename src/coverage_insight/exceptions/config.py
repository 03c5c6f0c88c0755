"""Configuration and request exceptions: paths, settings, caller input."""

from pathlib import Path
from typing import Any

from .base import CoverageInsightError


class ConfigurationError(CoverageInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidRequestError(ConfigurationError):
    """Raised synchronously when caller input is malformed."""

    def __init__(self, field_name: str, reason: str):
        super().__init__(
            f"Invalid request: {field_name} {reason}",
            details={"field": field_name, "reason": reason},
        )
        self.field_name = field_name
        self.reason = reason
