"""Exception hierarchy for Coverage Insight."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    JobTimeoutError,
    ParsingError,
)
from .base import CoverageInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    InvalidRequestError,
)
from .history import (
    GitReadError,
    HistoryError,
    ReportError,
    ReportNotFoundError,
    RepositoryNotFoundError,
)

__all__ = [
    "CoverageInsightError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "JobTimeoutError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "InvalidRequestError",
    "HistoryError",
    "RepositoryNotFoundError",
    "GitReadError",
    "ReportError",
    "ReportNotFoundError",
]
