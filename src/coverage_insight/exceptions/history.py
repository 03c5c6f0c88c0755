"""Version-control and report-history exceptions."""

from typing import Optional

from .base import CoverageInsightError


class HistoryError(CoverageInsightError):
    """Base class for git history errors."""

    pass


class RepositoryNotFoundError(HistoryError):
    """Raised when the project path holds no git repository."""

    def __init__(self, path: str):
        super().__init__(f"Not a git repository: {path}", details={"path": path})
        self.path = path


class GitReadError(HistoryError):
    """Raised when a repository exists but reading from it fails."""

    def __init__(self, path: str, reason: str, command: Optional[str] = None):
        details = {"path": path, "reason": reason}
        if command:
            details["command"] = command
        super().__init__(f"Failed to read git repository: {path}", details=details)
        self.path = path
        self.reason = reason
        self.command = command


class ReportError(CoverageInsightError):
    """Base class for report export/history errors."""

    pass


class ReportNotFoundError(ReportError):
    """Raised when no analysis result or history entry exists for an id."""

    def __init__(self, report_id: str):
        super().__init__(f"Analysis result not found: {report_id}", details={"id": report_id})
        self.report_id = report_id
