"""Report rendering and saved-report history."""

from .history import ReportEntry, ReportHistoryDB
from .text_report import print_report, render_report

__all__ = ["render_report", "print_report", "ReportHistoryDB", "ReportEntry"]
