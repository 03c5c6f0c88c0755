"""Data models for git history extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ChangeKind(str, Enum):
    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"
    RENAME = "rename"


class EditKind(str, Enum):
    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(frozen=True)
class Edit:
    """One hunk-level edit. Ranges are 1-based, end-exclusive.

    ``old_start``/``old_end`` index the parent revision, ``new_start``/
    ``new_end`` the commit's revision.
    """

    old_start: int
    old_end: int
    new_start: int
    new_end: int

    @property
    def kind(self) -> EditKind:
        if self.old_end == self.old_start:
            return EditKind.INSERT
        if self.new_end == self.new_start:
            return EditKind.DELETE
        return EditKind.REPLACE


@dataclass
class CodeChange:
    """Line-level change to one file in one commit.

    ``added_lines`` are line numbers in the new revision, ``deleted_lines``
    in the old one. ``modified_lines`` is the subset of ``added_lines``
    produced by REPLACE edits.
    """

    file_path: str
    kind: ChangeKind
    old_path: Optional[str] = None
    added_lines: list[int] = field(default_factory=list)
    deleted_lines: list[int] = field(default_factory=list)
    modified_lines: list[int] = field(default_factory=list)

    @property
    def lines_added(self) -> int:
        return len(self.added_lines)

    @property
    def lines_deleted(self) -> int:
        return len(self.deleted_lines)


@dataclass
class CommitRecord:
    hash: str
    author_name: str
    author_email: str
    timestamp: int  # unix seconds
    message: str
    parents: list[str] = field(default_factory=list)
    changes: list[CodeChange] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def first_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    @property
    def committed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def lines_added(self) -> int:
        return sum(c.lines_added for c in self.changes)

    @property
    def lines_deleted(self) -> int:
        return sum(c.lines_deleted for c in self.changes)


@dataclass
class DeveloperStats:
    email: str
    name: str
    total_commits: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    lines_modified: int = 0
    first_commit: Optional[int] = None
    last_commit: Optional[int] = None


@dataclass
class GitHistory:
    """Commits newest first, with per-author aggregates."""

    commits: list[CommitRecord] = field(default_factory=list)
    developers: dict[str, DeveloperStats] = field(default_factory=dict)
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    is_repository: bool = False

    @property
    def total_commits(self) -> int:
        return len(self.commits)

    @property
    def total_developers(self) -> int:
        return len(self.developers)
