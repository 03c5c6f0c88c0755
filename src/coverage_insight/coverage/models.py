"""Coverage report models.

Percentages are stored unrounded; rounding belongs to presentation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..scanning.models import ClassKind
from .granularity import GranularityLevel


@dataclass
class MethodCoverage:
    """Flattened per-method coverage row."""

    class_name: str
    method_name: str
    signature: str
    full_signature: str
    file_path: str
    start_line: int
    end_line: int
    complexity: int
    covered: bool = False
    test_method_count: int = 0
    covering_tests: list[str] = field(default_factory=list)
    granularity: GranularityLevel = GranularityLevel.POOR
    granularity_score: int = 0

    @property
    def lines_of_code(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass
class FileStatistics:
    """Coverage of one source file (one business class)."""

    file_path: str
    class_name: str
    fully_qualified_name: str
    package_name: str
    kind: ClassKind
    corresponding_test_class: str
    has_test_class: bool = False
    total_methods: int = 0
    covered_methods: int = 0
    coverage_rate: float = 0.0
    methods: list[MethodCoverage] = field(default_factory=list)

    @property
    def uncovered_methods(self) -> int:
        return self.total_methods - self.covered_methods

    @property
    def is_covered(self) -> bool:
        return self.coverage_rate > 0


def empty_distribution() -> dict[GranularityLevel, int]:
    return {level: 0 for level in GranularityLevel}


@dataclass
class CommitStatistics:
    """Coverage impact of a single commit."""

    commit_hash: str
    author_name: str
    author_email: str
    timestamp: int
    message: str
    lines_added: int = 0
    lines_deleted: int = 0
    methods_added: int = 0
    methods_modified: int = 0
    added_methods_covered: int = 0
    modified_methods_covered: int = 0
    added_code_coverage: float = 0.0
    modified_code_coverage: float = 0.0
    affected_files: list[str] = field(default_factory=list)
    affected_methods: list[str] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:7]


@dataclass
class CoverageReport:
    overall_coverage: float = 0.0
    total_business_classes: int = 0
    covered_business_classes: int = 0
    total_test_classes: int = 0
    total_test_methods: int = 0
    total_methods: int = 0
    covered_methods: int = 0
    average_granularity_score: float = 0.0
    granularity_distribution: dict[GranularityLevel, int] = field(
        default_factory=empty_distribution
    )
    files: list[FileStatistics] = field(default_factory=list)
    methods: list[MethodCoverage] = field(default_factory=list)
    uncovered: list[MethodCoverage] = field(default_factory=list)
    commit_statistics: list[CommitStatistics] = field(default_factory=list)

    @property
    def uncovered_methods(self) -> int:
        return self.total_methods - self.covered_methods

    def file_for(self, file_path: str) -> Optional[FileStatistics]:
        for stats in self.files:
            if stats.file_path == file_path:
                return stats
        return None
