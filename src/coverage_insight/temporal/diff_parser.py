"""Parse ``git diff --unified=0`` output into CodeChange records.

With zero context lines every hunk is exactly one edit region, so the hunk
header alone classifies it:

    @@ -a,0 +c,d @@   INSERT   new lines c .. c+d-1
    @@ -a,b +c,0 @@   DELETE   old lines a .. a+b-1
    @@ -a,b +c,d @@   REPLACE  both ranges

Hunk bodies are still consumed line by line so that content such as a
removed ``-- comment`` line is never mistaken for a file header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import ChangeKind, CodeChange, Edit, EditKind

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_DEV_NULL = "/dev/null"


@dataclass
class FileDiff:
    """Raw per-file section of a unified diff."""

    old_path: Optional[str] = None
    new_path: Optional[str] = None
    kind: ChangeKind = ChangeKind.MODIFY
    edits: list[Edit] = field(default_factory=list)

    @property
    def path(self) -> str:
        if self.kind is ChangeKind.DELETE:
            return self.old_path or ""
        return self.new_path or self.old_path or ""


def parse_hunk_header(line: str) -> Optional[Edit]:
    """Turn ``@@ -a,b +c,d @@`` into an Edit (None if not a hunk header)."""
    match = _HUNK_RE.match(line)
    if match is None:
        return None
    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) is not None else 1

    # A zero count means "after line N": the range is empty at N + 1
    if old_count == 0:
        old_start += 1
    if new_count == 0:
        new_start += 1
    return Edit(
        old_start=old_start,
        old_end=old_start + old_count,
        new_start=new_start,
        new_end=new_start + new_count,
    )


def parse_unified_diff(text: str) -> list[FileDiff]:
    """Split a multi-file unified diff into FileDiff sections."""
    files: list[FileDiff] = []
    current: Optional[FileDiff] = None
    old_remaining = 0
    new_remaining = 0

    for line in text.splitlines():
        if old_remaining > 0 or new_remaining > 0:
            if line.startswith("-"):
                old_remaining -= 1
            elif line.startswith("+"):
                new_remaining -= 1
            elif line.startswith(" "):
                old_remaining -= 1
                new_remaining -= 1
            # "\ No newline at end of file" consumes nothing
            continue

        if line.startswith("diff --git "):
            current = FileDiff()
            current.old_path, current.new_path = _paths_from_header(line[len("diff --git ") :])
            files.append(current)
            continue

        if current is None:
            continue

        if line.startswith("new file mode"):
            current.kind = ChangeKind.ADD
        elif line.startswith("deleted file mode"):
            current.kind = ChangeKind.DELETE
        elif line.startswith("rename from "):
            current.kind = ChangeKind.RENAME
            current.old_path = _unquote(line[len("rename from ") :])
        elif line.startswith("rename to "):
            current.kind = ChangeKind.RENAME
            current.new_path = _unquote(line[len("rename to ") :])
        elif line.startswith("--- "):
            path = _strip_prefix(line[4:], "a/")
            if path is not None:
                current.old_path = path
        elif line.startswith("+++ "):
            path = _strip_prefix(line[4:], "b/")
            if path is not None:
                current.new_path = path
        elif line.startswith("@@"):
            edit = parse_hunk_header(line)
            if edit is not None:
                current.edits.append(edit)
                old_remaining = edit.old_end - edit.old_start
                new_remaining = edit.new_end - edit.new_start

    return files


def to_code_change(file_diff: FileDiff) -> CodeChange:
    """Decompose edits into added/deleted line sets."""
    added: list[int] = []
    deleted: list[int] = []
    modified: list[int] = []
    for edit in file_diff.edits:
        kind = edit.kind
        if kind in (EditKind.DELETE, EditKind.REPLACE):
            deleted.extend(range(edit.old_start, edit.old_end))
        if kind in (EditKind.INSERT, EditKind.REPLACE):
            added.extend(range(edit.new_start, edit.new_end))
        if kind is EditKind.REPLACE:
            modified.extend(range(edit.new_start, edit.new_end))

    old_path = file_diff.old_path if file_diff.kind is ChangeKind.RENAME else None
    return CodeChange(
        file_path=file_diff.path,
        kind=file_diff.kind,
        old_path=old_path,
        added_lines=added,
        deleted_lines=deleted,
        modified_lines=modified,
    )


def parse_code_changes(text: str, extensions: Iterable[str] = (".java",)) -> list[CodeChange]:
    """CodeChanges for files whose old or new path has a matching extension."""
    suffixes = tuple(extensions)
    changes: list[CodeChange] = []
    for file_diff in parse_unified_diff(text):
        paths = [p for p in (file_diff.old_path, file_diff.new_path) if p]
        if any(p.endswith(suffixes) for p in paths):
            changes.append(to_code_change(file_diff))
    return changes


def _paths_from_header(rest: str) -> tuple[Optional[str], Optional[str]]:
    """Best-effort split of ``a/<old> b/<new>`` from a ``diff --git`` line."""
    rest = rest.strip()
    if rest.startswith('"'):
        return None, None
    idx = rest.rfind(" b/")
    if not rest.startswith("a/") or idx < 0:
        return None, None
    return rest[2:idx], rest[idx + 3 :]


def _strip_prefix(raw: str, prefix: str) -> Optional[str]:
    path = _unquote(raw.rstrip("\t"))
    if path == _DEV_NULL:
        return None
    if path.startswith(prefix):
        return path[len(prefix) :]
    return path


def _unquote(path: str) -> str:
    path = path.strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        return path[1:-1]
    return path
