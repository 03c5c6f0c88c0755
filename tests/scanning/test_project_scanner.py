"""Tests for ProjectScanner and source-file enumeration."""

import shutil
from pathlib import Path

import pytest

from coverage_insight.exceptions import InvalidPathError
from coverage_insight.scanning import ProjectScanner, ProjectType
from coverage_insight.scanning.files import iter_source_files, resolve_roots, should_skip_dir

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not found")


class TestProjectScanner:
    def test_maven_layout(self, java_project):
        structure = ProjectScanner().scan(str(java_project))

        assert structure.project_type is ProjectType.MAVEN
        assert structure.project_name == "shop"
        assert structure.source_roots == ["src/main/java"]
        assert structure.test_roots == ["src/test/java"]
        assert len(structure.source_files) == 4
        assert not any("target" in Path(f).parts for f in structure.source_files)
        assert not structure.is_git_repository
        assert structure.commit_count == 0

    def test_gradle_kts(self, tmp_path):
        (tmp_path / "build.gradle.kts").write_text("")
        assert ProjectScanner().scan(str(tmp_path)).project_type is ProjectType.GRADLE

    def test_unknown_layout_has_no_roots(self, tmp_path):
        structure = ProjectScanner().scan(str(tmp_path))
        assert structure.project_type is ProjectType.UNKNOWN
        assert structure.source_roots == []
        assert structure.test_roots == []

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(InvalidPathError):
            ProjectScanner().scan(str(tmp_path / "missing"))

    def test_file_path_raises(self, tmp_path):
        target = tmp_path / "pom.xml"
        target.write_text("<project/>")
        with pytest.raises(InvalidPathError):
            ProjectScanner().scan(str(target))

    @requires_git
    def test_git_presence_and_commit_count(self, git_project):
        root, _, _ = git_project
        structure = ProjectScanner().scan(str(root))
        assert structure.is_git_repository
        assert structure.commit_count == 2


class TestFiles:
    def test_hidden_and_build_dirs_skipped(self):
        skip = ["target", "build"]
        assert should_skip_dir(".git", skip)
        assert should_skip_dir("target", skip)
        assert not should_skip_dir("src", skip)

    def test_iteration_is_sorted(self, tmp_path):
        for name in ["b/Z.java", "a/Y.java", "a/X.java", "a/readme.md"]:
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        found = [
            p.relative_to(tmp_path).as_posix() for p in iter_source_files(tmp_path, ".java", [])
        ]
        assert found == ["a/X.java", "a/Y.java", "b/Z.java"]

    def test_resolve_roots_relative_and_deduplicated(self, tmp_path):
        roots = resolve_roots(tmp_path, ["src", str(tmp_path / "src"), "lib"])
        assert roots == [(tmp_path / "src").resolve(), (tmp_path / "lib").resolve()]
