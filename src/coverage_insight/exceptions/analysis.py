"""Analysis-related exceptions: file access, parsing, job execution."""

from pathlib import Path

from .base import CoverageInsightError


class AnalysisError(CoverageInsightError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when file content cannot be parsed."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to parse Java file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class JobTimeoutError(AnalysisError):
    """Raised when a job exceeds its configured time budget."""

    def __init__(self, job_id: str, elapsed: float, limit: float):
        super().__init__(
            f"Analysis exceeded {limit:.0f}s time limit",
            details={"job_id": job_id, "elapsed": f"{elapsed:.1f}s"},
        )
        self.job_id = job_id
        self.elapsed = elapsed
        self.limit = limit
