"""Extract line-level git history via subprocess."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import GitReadError, HistoryError, RepositoryNotFoundError
from ..logging_config import get_logger
from .developers import build_developer_stats
from .diff_parser import parse_code_changes
from .models import CodeChange, CommitRecord, GitHistory

logger = get_logger(__name__)

# Field and record separators for ``git log --format``; %ct is the committer
# time, the same clock --since and --until filter on
_FS = "\x1f"
_RS = "\x1e"
_LOG_FORMAT = f"%H{_FS}%P{_FS}%an{_FS}%ae{_FS}%ct{_FS}%B{_RS}"


class GitExtractor:
    """Reads commit history and per-commit line changes from a repository.

    Each commit is diffed against its first parent, or against the empty
    tree when it has none, so root commits report their added lines.
    """

    def __init__(self, repo_path: str, config: Optional[AnalysisConfig] = None):
        self.repo_path = str(Path(repo_path).resolve())
        self.config = config or DEFAULT_CONFIG
        self._empty_tree: Optional[str] = None

    # ── public API ────────────────────────────────────────────────

    def extract(
        self, since: Optional[datetime] = None, until: Optional[datetime] = None
    ) -> GitHistory:
        """History for the repository, or an empty history if none is readable.

        Repository failures are recovered here: the job continues without
        commit data.
        """
        try:
            commits = self.read_commits(since=since, until=until)
        except RepositoryNotFoundError:
            logger.info("Not a git repository, skipping history analysis")
            return GitHistory(since=since, until=until)
        except GitReadError as e:
            logger.warning("Git history unavailable: %s", e)
            return GitHistory(since=since, until=until)

        return GitHistory(
            commits=commits,
            developers=build_developer_stats(commits),
            since=since,
            until=until,
            is_repository=True,
        )

    def read_commits(
        self, since: Optional[datetime] = None, until: Optional[datetime] = None
    ) -> list[CommitRecord]:
        """Newest-first commits with their CodeChanges.

        Raises:
            RepositoryNotFoundError: No repository at ``repo_path``
            GitReadError: The repository could not be read
        """
        self.ensure_repository()

        args = ["log", f"-n{self.config.git_max_commits}", f"--format={_LOG_FORMAT}"]
        if since is not None:
            args.append(f"--since=@{int(since.timestamp())}")
        if until is not None:
            args.append(f"--until=@{int(until.timestamp())}")

        raw = self._git(*args)
        commits = self._parse_log(raw)
        for commit in commits:
            try:
                commit.changes = self.commit_changes(commit)
            except GitReadError as e:
                # The commit still counts toward history and developer stats
                logger.warning(
                    "Cannot diff commit %s, keeping it without changes: %s", commit.short_hash, e
                )
                commit.changes = []
        logger.info("Read %d commits from %s", len(commits), self.repo_path)
        return commits

    def commit_changes(self, commit: CommitRecord) -> list[CodeChange]:
        """CodeChanges of one commit relative to its first parent."""
        base = commit.first_parent or self.empty_tree()
        raw = self._git(*self._diff_args(base, commit.hash))
        return parse_code_changes(raw, (self.config.source_extension,))

    def commit_diff_text(self, commit_hash: str) -> str:
        """Human-readable header, changed-file list and full patch of a commit.

        Best effort: failures are returned as an error message, not raised.
        """
        try:
            self.ensure_repository()
            full_hash = self._git("rev-parse", "--verify", "--quiet", f"{commit_hash}^{{commit}}")
        except RepositoryNotFoundError as e:
            return f"Failed to read commit diff: {e}"
        except GitReadError:
            return f"Commit not found: {commit_hash}"

        try:
            records = self._parse_log(
                self._git("log", "-n1", f"--format={_LOG_FORMAT}", full_hash.strip())
            )
            if not records:
                return f"Commit not found: {commit_hash}"
            commit = records[0]
            base = commit.first_parent or self.empty_tree()
            name_status = self._git("diff", "--name-status", "-M", base, commit.hash)
            patch = self._git(*self._diff_args(base, commit.hash, context=3))
        except HistoryError as e:
            return f"Failed to read commit diff: {e}"

        lines = [
            f"Commit: {commit.short_hash}",
            f"Author: {commit.author_name}",
            f"Email: {commit.author_email}",
            f"Date: {commit.committed_at.isoformat()}",
            f"Message: {commit.message.strip()}",
            "",
            "=== Changed files ===",
            "",
        ]
        lines.extend(_format_name_status(name_status))
        lines.extend(["", "=== Diff ===", ""])
        return "\n".join(lines) + "\n" + patch

    def is_repository(self) -> bool:
        try:
            self.ensure_repository()
        except HistoryError:
            return False
        return True

    def count_commits(self, limit: int = 10000) -> int:
        """Commits reachable from any ref, capped at ``limit``."""
        raw = self._git("rev-list", "--all", f"--max-count={limit}", "--count")
        return int(raw.strip() or 0)

    def ensure_repository(self) -> None:
        if not Path(self.repo_path).is_dir():
            raise RepositoryNotFoundError(self.repo_path)
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except FileNotFoundError:
            raise GitReadError(self.repo_path, "git executable not found")
        except subprocess.TimeoutExpired:
            raise GitReadError(self.repo_path, "timed out probing repository")
        if result.returncode != 0:
            raise RepositoryNotFoundError(self.repo_path)

    def empty_tree(self) -> str:
        """Object id of the empty tree in this repository's hash format."""
        if self._empty_tree is None:
            self._empty_tree = self._git("hash-object", "-t", "tree", "--stdin", stdin="").strip()
        return self._empty_tree

    # ── internals ─────────────────────────────────────────────────

    @staticmethod
    def _diff_args(base: str, commit_hash: str, context: int = 0) -> list[str]:
        return [
            "diff",
            "--no-color",
            "--no-ext-diff",
            "-M",
            f"--unified={context}",
            "--src-prefix=a/",
            "--dst-prefix=b/",
            base,
            commit_hash,
        ]

    def _git(self, *args: str, stdin: Optional[str] = None) -> str:
        cmd = ["git", "-c", "core.quotepath=off", "-C", self.repo_path, *args]
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.config.git_timeout_seconds,
            )
        except FileNotFoundError:
            raise GitReadError(self.repo_path, "git executable not found")
        except subprocess.TimeoutExpired:
            raise GitReadError(self.repo_path, "git command timed out", command=" ".join(args[:1]))
        if result.returncode != 0:
            raise GitReadError(self.repo_path, result.stderr.strip(), command=" ".join(args[:1]))
        return result.stdout

    @staticmethod
    def _parse_log(raw: str) -> list[CommitRecord]:
        """Parse ``_LOG_FORMAT`` records into CommitRecords (changes empty)."""
        commits: list[CommitRecord] = []
        for record in raw.split(_RS):
            record = record.strip("\n")
            if not record:
                continue
            parts = record.split(_FS, 5)
            if len(parts) < 6:
                logger.debug("Skipping malformed log record: %r", record[:80])
                continue
            sha, parents, name, email, ts, message = parts
            try:
                timestamp = int(ts)
            except ValueError:
                continue
            commits.append(
                CommitRecord(
                    hash=sha,
                    author_name=name,
                    author_email=email,
                    timestamp=timestamp,
                    message=message.strip(),
                    parents=parents.split(),
                )
            )
        return commits


def _format_name_status(raw: str) -> list[str]:
    """``M\\tpath`` / ``R090\\told\\tnew`` -> ``[MODIFY] path`` / ``[RENAME] old -> new``."""
    kinds = {"A": "ADD", "M": "MODIFY", "D": "DELETE", "R": "RENAME", "C": "COPY", "T": "TYPE"}
    out: list[str] = []
    for line in raw.splitlines():
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        kind = kinds.get(parts[0][:1], parts[0])
        if len(parts) >= 3:
            out.append(f"[{kind}] {parts[1]} -> {parts[2]}")
        else:
            out.append(f"[{kind}] {parts[1]}")
    return out
