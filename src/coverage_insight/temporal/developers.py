"""Per-developer aggregates over a commit list."""

from __future__ import annotations

from .models import CommitRecord, DeveloperStats


def build_developer_stats(commits: list[CommitRecord]) -> dict[str, DeveloperStats]:
    """Aggregate commit count and line totals keyed by author email.

    The display name is taken from the first (newest) commit seen for an
    email. Lines modified mirrors lines deleted: a deleted line is counted
    as a modification of existing code.
    """
    stats: dict[str, DeveloperStats] = {}
    for commit in commits:
        dev = stats.get(commit.author_email)
        if dev is None:
            dev = DeveloperStats(email=commit.author_email, name=commit.author_name)
            stats[commit.author_email] = dev

        added = commit.lines_added
        deleted = commit.lines_deleted
        dev.total_commits += 1
        dev.lines_added += added
        dev.lines_deleted += deleted
        dev.lines_modified += deleted

        if dev.first_commit is None or commit.timestamp < dev.first_commit:
            dev.first_commit = commit.timestamp
        if dev.last_commit is None or commit.timestamp > dev.last_commit:
            dev.last_commit = commit.timestamp
    return stats
