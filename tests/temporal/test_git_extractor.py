"""Tests for GitExtractor against real throwaway repositories."""

import shutil
import subprocess
from datetime import datetime, timedelta, timezone

import pytest

from coverage_insight.config import AnalysisConfig
from coverage_insight.exceptions import GitReadError, RepositoryNotFoundError
from coverage_insight.temporal import ChangeKind, CodeChange, CommitRecord, GitExtractor
from coverage_insight.temporal import build_developer_stats

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not found")


class TestReadCommits:
    def test_newest_first(self, git_project):
        root, first, second = git_project
        commits = GitExtractor(str(root)).read_commits()

        assert [c.hash for c in commits] == [second, first]
        assert commits[0].parents == [first]
        assert commits[1].parents == []
        assert commits[0].message == "Tighten divide, add count"
        assert commits[0].author_email == "dev@example.com"
        assert commits[0].short_hash == second[:7]

    def test_root_commit_diffs_against_empty_tree(self, git_project):
        root, first, _ = git_project
        commits = GitExtractor(str(root)).read_commits()
        initial = commits[-1]

        assert initial.hash == first
        paths = {c.file_path for c in initial.changes}
        assert "src/main/java/com/example/Calculator.java" in paths
        assert all(c.kind is ChangeKind.ADD for c in initial.changes)
        calculator = next(c for c in initial.changes if c.file_path.endswith("Calculator.java"))
        assert calculator.added_lines == list(range(1, 30))
        # pom.xml is filtered out by extension
        assert all(p.endswith(".java") for p in paths)

    def test_modify_commit_line_sets(self, git_project):
        root, _, _ = git_project
        latest = GitExtractor(str(root)).read_commits()[0]
        changes = {c.file_path.rsplit("/", 1)[-1]: c for c in latest.changes}

        calculator = changes["Calculator.java"]
        assert calculator.kind is ChangeKind.MODIFY
        assert calculator.added_lines == [10]
        assert calculator.deleted_lines == [10]
        assert calculator.modified_lines == [10]

        service = changes["OrderService.java"]
        assert service.added_lines == [6]
        assert service.deleted_lines == []
        assert latest.lines_added == 2
        assert latest.lines_deleted == 1

    def test_max_commits_bound(self, git_project):
        root, _, second = git_project
        config = AnalysisConfig(git_max_commits=1)
        commits = GitExtractor(str(root), config).read_commits()
        assert [c.hash for c in commits] == [second]

    def test_until_window_excludes_everything_before_history(self, git_project):
        root, _, _ = git_project
        long_ago = datetime.now(timezone.utc) - timedelta(days=3650)
        assert GitExtractor(str(root)).read_commits(until=long_ago) == []

    def test_not_a_repository(self, tmp_path):
        with pytest.raises(RepositoryNotFoundError):
            GitExtractor(str(tmp_path)).read_commits()


class TestExtract:
    def test_history_with_developers(self, git_project):
        root, _, _ = git_project
        history = GitExtractor(str(root)).extract()

        assert history.is_repository
        assert history.total_commits == 2
        assert history.total_developers == 1
        dev = history.developers["dev@example.com"]
        assert dev.total_commits == 2
        assert dev.lines_deleted == 1
        assert dev.lines_modified == dev.lines_deleted

    def test_failed_commit_diff_keeps_the_rest(self, git_project, monkeypatch):
        root, first, second = git_project
        real_changes = GitExtractor.commit_changes

        def diff_fails_for_root(self, commit):
            if commit.hash == first:
                raise GitReadError(self.repo_path, "timed out", command="git diff")
            return real_changes(self, commit)

        monkeypatch.setattr(GitExtractor, "commit_changes", diff_fails_for_root)
        history = GitExtractor(str(root)).extract()

        assert history.is_repository
        assert [c.hash for c in history.commits] == [second, first]
        assert history.commits[1].changes == []
        assert history.commits[0].changes
        assert history.developers["dev@example.com"].total_commits == 2

    def test_missing_repository_yields_empty_history(self, tmp_path):
        history = GitExtractor(str(tmp_path)).extract()
        assert not history.is_repository
        assert history.commits == []
        assert history.developers == {}

    def test_missing_directory_yields_empty_history(self, tmp_path):
        history = GitExtractor(str(tmp_path / "nope")).extract()
        assert history.total_commits == 0


class TestCommitDiffText:
    def test_header_files_and_patch(self, git_project):
        root, _, second = git_project
        text = GitExtractor(str(root)).commit_diff_text(second[:10])

        assert text.startswith(f"Commit: {second[:7]}\n")
        assert "Author: Dev" in text
        assert "Message: Tighten divide, add count" in text
        assert "[MODIFY] src/main/java/com/example/Calculator.java" in text
        assert "+            throw new ArithmeticException(\"b\");" in text

    def test_root_commit_lists_added_files(self, git_project):
        root, first, _ = git_project
        text = GitExtractor(str(root)).commit_diff_text(first)
        assert "[ADD] pom.xml" in text

    def test_unknown_commit_is_reported_not_raised(self, git_project):
        root, _, _ = git_project
        text = GitExtractor(str(root)).commit_diff_text("deadbeef")
        assert text == "Commit not found: deadbeef"

    def test_not_a_repository_is_reported_not_raised(self, tmp_path):
        text = GitExtractor(str(tmp_path)).commit_diff_text("abc123")
        assert text.startswith("Failed to read commit diff")


class TestDeveloperStats:
    def test_aggregates_by_email(self):
        change = CodeChange(
            file_path="A.java", kind=ChangeKind.MODIFY, added_lines=[1, 2], deleted_lines=[3]
        )
        commits = [
            CommitRecord("c3", "Ann B.", "ann@example.com", 300, "m3", changes=[change]),
            CommitRecord("c2", "Bob", "bob@example.com", 200, "m2"),
            CommitRecord("c1", "Ann", "ann@example.com", 100, "m1", changes=[change]),
        ]
        stats = build_developer_stats(commits)

        ann = stats["ann@example.com"]
        assert ann.name == "Ann B."
        assert ann.total_commits == 2
        assert (ann.lines_added, ann.lines_deleted, ann.lines_modified) == (4, 2, 2)
        assert (ann.first_commit, ann.last_commit) == (100, 300)
        assert stats["bob@example.com"].lines_added == 0


class TestCommitTime:
    def test_timestamp_is_committer_time(self, git_project, monkeypatch):
        root, _, _ = git_project
        (root / "README.md").write_text("rebased\n", encoding="utf-8")
        monkeypatch.setenv("GIT_AUTHOR_DATE", "2001-01-01T00:00:00+0000")
        for args in (["add", "-A"], ["commit", "-q", "-m", "Rebased onto main"]):
            subprocess.run(["git", "-C", str(root), *args], check=True, capture_output=True)

        recent = datetime.now(timezone.utc) - timedelta(days=1)
        commits = GitExtractor(str(root)).read_commits(since=recent)

        assert commits[0].message == "Rebased onto main"
        assert commits[0].timestamp >= int(recent.timestamp())
