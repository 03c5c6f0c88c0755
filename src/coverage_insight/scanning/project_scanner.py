"""Project scanner: layout, build type and git presence of a Java project."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import HistoryError, InvalidPathError
from ..logging_config import get_logger
from ..temporal.git_extractor import GitExtractor
from .files import iter_source_files

logger = get_logger(__name__)

STANDARD_SOURCE_ROOT = "src/main/java"
STANDARD_TEST_ROOT = "src/test/java"
MAX_COUNTED_COMMITS = 10000


class ProjectType(str, Enum):
    MAVEN = "maven"
    GRADLE = "gradle"
    UNKNOWN = "unknown"


@dataclass
class ProjectStructure:
    project_path: str
    project_name: str
    project_type: ProjectType
    source_roots: list[str] = field(default_factory=list)
    test_roots: list[str] = field(default_factory=list)
    source_files: list[str] = field(default_factory=list)
    is_git_repository: bool = False
    commit_count: int = 0


def detect_project_type(root: Path) -> ProjectType:
    if (root / "pom.xml").exists():
        return ProjectType.MAVEN
    if (root / "build.gradle").exists() or (root / "build.gradle.kts").exists():
        return ProjectType.GRADLE
    return ProjectType.UNKNOWN


class ProjectScanner:
    """Discovers source/test roots and version-control presence."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def scan(self, project_path: str) -> ProjectStructure:
        """Describe the project at ``project_path``.

        Raises:
            InvalidPathError: If the path is missing or not a directory
        """
        root = Path(project_path)
        if not root.exists() or not root.is_dir():
            raise InvalidPathError(root, "does not exist or is not a directory")

        structure = ProjectStructure(
            project_path=str(root.resolve()),
            project_name=root.resolve().name,
            project_type=detect_project_type(root),
        )
        if (root / STANDARD_SOURCE_ROOT).is_dir():
            structure.source_roots.append(STANDARD_SOURCE_ROOT)
        if (root / STANDARD_TEST_ROOT).is_dir():
            structure.test_roots.append(STANDARD_TEST_ROOT)

        structure.source_files = [
            str(p)
            for p in iter_source_files(root, self.config.source_extension, self.config.skip_dirs)
        ]

        git = GitExtractor(str(root), self.config)
        if git.is_repository():
            structure.is_git_repository = True
            try:
                structure.commit_count = git.count_commits(MAX_COUNTED_COMMITS)
            except HistoryError as e:
                logger.warning("Cannot count commits in %s: %s", root, e)

        logger.debug(
            "Scanned %s: type=%s, %d source files, git=%s",
            structure.project_name,
            structure.project_type.value,
            len(structure.source_files),
            structure.is_git_repository,
        )
        return structure
