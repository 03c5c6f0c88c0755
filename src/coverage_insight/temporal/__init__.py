"""Git history extraction: commits, line-level changes, developer stats."""

from .developers import build_developer_stats
from .diff_parser import parse_code_changes, parse_unified_diff
from .git_extractor import GitExtractor
from .models import ChangeKind, CodeChange, CommitRecord, DeveloperStats, Edit, EditKind, GitHistory

__all__ = [
    "GitExtractor",
    "GitHistory",
    "CommitRecord",
    "CodeChange",
    "ChangeKind",
    "Edit",
    "EditKind",
    "DeveloperStats",
    "build_developer_stats",
    "parse_code_changes",
    "parse_unified_diff",
]
