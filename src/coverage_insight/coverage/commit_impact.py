"""Per-commit coverage impact.

Maps each commit's changed lines back to the business methods that
enclose them, then checks whether those methods have a test. Everything
here is derived from already-extracted classes plus one commit's
CodeChanges; nothing is cached between commits.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..logging_config import get_logger
from ..scanning.models import BusinessClass, BusinessMethod, TestClass
from ..temporal.models import ChangeKind, CommitRecord
from .granularity import names_contain
from .matcher import coverage_rate
from .models import CommitStatistics

logger = get_logger(__name__)

_MODIFYING_KINDS = (ChangeKind.MODIFY, ChangeKind.RENAME)
_TEST_SUFFIXES = ("Test", "Tests")


def normalize_path(path: str) -> str:
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.rstrip("/")


def paths_match(a: str, b: str) -> bool:
    """True when either normalized path is a segment-aligned suffix of the other."""
    a, b = normalize_path(a), normalize_path(b)
    if not a or not b:
        return False
    if a == b:
        return True
    return a.endswith("/" + b) or b.endswith("/" + a)


def find_business_class(
    file_path: str, business_classes: Iterable[BusinessClass]
) -> Optional[BusinessClass]:
    for business_class in business_classes:
        if paths_match(file_path, business_class.file_path):
            return business_class
    return None


def find_enclosing_method(line: int, business_class: BusinessClass) -> Optional[BusinessMethod]:
    """Innermost method containing ``line``.

    Overlapping spans resolve to the smallest span, then the earliest
    start, then declaration order.
    """
    best: Optional[BusinessMethod] = None
    for method in business_class.methods:
        if not method.contains_line(line):
            continue
        if best is None or (method.lines_of_code, method.start_line) < (
            best.lines_of_code,
            best.start_line,
        ):
            best = method
    return best


def find_commit_test_class(
    business_class: BusinessClass, test_classes: Iterable[TestClass]
) -> Optional[TestClass]:
    """Test class named ``<Business>Test`` or ``<Business>Tests``."""
    wanted = {business_class.class_name + suffix for suffix in _TEST_SUFFIXES}
    for test_class in test_classes:
        if test_class.class_name in wanted:
            return test_class
    return None


def is_covered_in_commit(method: BusinessMethod, test_class: Optional[TestClass]) -> bool:
    # Name containment only; the inferred-name rule is not applied here.
    if test_class is None:
        return False
    return any(names_contain(test.name, method.name) for test in test_class.test_methods)


class CommitImpactAnalyzer:
    """Builds CommitStatistics for a list of commits."""

    def __init__(self, business_classes: list[BusinessClass], test_classes: list[TestClass]):
        self.business_classes = business_classes
        self.test_classes = test_classes

    def analyze_all(self, commits: Iterable[CommitRecord]) -> list[CommitStatistics]:
        stats = [self.analyze(commit) for commit in commits]
        logger.info("Computed coverage impact for %d commits", len(stats))
        return stats

    def analyze(self, commit: CommitRecord) -> CommitStatistics:
        stats = CommitStatistics(
            commit_hash=commit.hash,
            author_name=commit.author_name,
            author_email=commit.author_email,
            timestamp=commit.timestamp,
            message=commit.message,
            lines_added=commit.lines_added,
            lines_deleted=commit.lines_deleted,
        )

        # id(method) -> (class, method, test class); insertion order is report order
        added: dict[int, tuple[BusinessClass, BusinessMethod, Optional[TestClass]]] = {}
        modified: set[int] = set()

        for change in commit.changes:
            stats.affected_files.append(change.file_path)
            business_class = find_business_class(change.file_path, self.business_classes)
            if business_class is None:
                continue
            test_class = find_commit_test_class(business_class, self.test_classes)
            replaced = set(change.modified_lines) if change.kind in _MODIFYING_KINDS else set()

            for line in change.added_lines:
                method = find_enclosing_method(line, business_class)
                if method is None:
                    continue
                added.setdefault(id(method), (business_class, method, test_class))
                if line in replaced:
                    modified.add(id(method))

        for key, (business_class, method, test_class) in added.items():
            covered = is_covered_in_commit(method, test_class)
            stats.methods_added += 1
            stats.added_methods_covered += covered
            if key in modified:
                stats.methods_modified += 1
                stats.modified_methods_covered += covered
            stats.affected_methods.append(f"{business_class.class_name}.{method.signature}")

        stats.added_code_coverage = coverage_rate(stats.added_methods_covered, stats.methods_added)
        stats.modified_code_coverage = coverage_rate(
            stats.modified_methods_covered, stats.methods_modified
        )
        return stats
