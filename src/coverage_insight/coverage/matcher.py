"""Coverage matcher: business methods -> covering test methods.

A test method covers a business method when either

    (a) the test name contains the method name (case-insensitive), or
    (b) the name inferred from the test equals the method name.

Matching is a pure function of two records; the matcher then writes the
outcome onto the business model and aggregates it into a CoverageReport.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..logging_config import get_logger
from ..scanning.models import BusinessClass, BusinessMethod, TestClass, TestMethod
from .granularity import GranularityLevel, inferred_name_matches, names_contain, score_method
from .models import CoverageReport, FileStatistics, MethodCoverage, empty_distribution

logger = get_logger(__name__)


def covers(test: TestMethod, method: BusinessMethod) -> bool:
    """True if ``test`` exercises ``method`` by naming convention."""
    return names_contain(test.name, method.name) or inferred_name_matches(test, method.name)


def find_covering_tests(
    method: BusinessMethod, test_class: Optional[TestClass]
) -> list[TestMethod]:
    """Covering tests of ``method`` in declaration order ([] without a test class)."""
    if test_class is None:
        return []
    return [test for test in test_class.test_methods if covers(test, method)]


def coverage_rate(covered: int, total: int) -> float:
    """Percentage in [0, 100]; 0.0 when there is nothing to cover."""
    if total == 0:
        return 0.0
    return covered / total * 100


def index_test_classes(test_classes: Iterable[TestClass]) -> dict[str, TestClass]:
    """Fully-qualified name -> test class; the first declaration wins."""
    index: dict[str, TestClass] = {}
    for test_class in test_classes:
        index.setdefault(test_class.fully_qualified_name, test_class)
    return index


class CoverageMatcher:
    """Computes method/class/file/project coverage and granularity.

    Running the matcher twice on the same inputs yields the same report:
    every per-method field is reassigned, never accumulated.
    """

    def analyze(
        self, business_classes: list[BusinessClass], test_classes: list[TestClass]
    ) -> CoverageReport:
        index = index_test_classes(test_classes)
        report = CoverageReport(
            total_business_classes=len(business_classes),
            total_test_classes=len(test_classes),
            total_test_methods=sum(len(tc.test_methods) for tc in test_classes),
        )
        distribution = empty_distribution()
        score_total = 0

        for business_class in business_classes:
            test_class = index.get(business_class.corresponding_test_class)
            file_stats = self._file_statistics(business_class, test_class)

            for method in business_class.methods:
                self.apply(method, find_covering_tests(method, test_class))
                row = self._method_row(method, business_class)
                file_stats.methods.append(row)
                report.methods.append(row)

                report.total_methods += 1
                if method.covered:
                    file_stats.covered_methods += 1
                    report.covered_methods += 1
                    distribution[method.granularity] += 1
                    score_total += method.granularity_score
                else:
                    report.uncovered.append(row)

            file_stats.total_methods = len(business_class.methods)
            file_stats.coverage_rate = coverage_rate(
                file_stats.covered_methods, file_stats.total_methods
            )
            business_class.coverage_rate = file_stats.coverage_rate
            report.files.append(file_stats)

        report.overall_coverage = coverage_rate(report.covered_methods, report.total_methods)
        report.covered_business_classes = sum(1 for f in report.files if f.is_covered)
        report.granularity_distribution = distribution
        report.average_granularity_score = (
            score_total / report.covered_methods if report.covered_methods else 0.0
        )

        logger.info(
            "Coverage: %d/%d methods (%.1f%%), %d/%d classes",
            report.covered_methods,
            report.total_methods,
            report.overall_coverage,
            report.covered_business_classes,
            report.total_business_classes,
        )
        return report

    @staticmethod
    def apply(method: BusinessMethod, covering: list[TestMethod]) -> None:
        """Record coverage outcome on the method."""
        method.covering_tests = list(covering)
        method.covered = bool(covering)
        method.granularity_score = score_method(method, covering)
        method.granularity = GranularityLevel.from_score(method.granularity_score)

    @staticmethod
    def _method_row(method: BusinessMethod, business_class: BusinessClass) -> MethodCoverage:
        return MethodCoverage(
            class_name=business_class.class_name,
            method_name=method.name,
            signature=method.signature,
            full_signature=method.full_signature,
            file_path=business_class.file_path,
            start_line=method.start_line,
            end_line=method.end_line,
            complexity=method.complexity,
            covered=method.covered,
            test_method_count=len(method.covering_tests),
            covering_tests=[t.name for t in method.covering_tests],
            granularity=method.granularity or GranularityLevel.POOR,
            granularity_score=method.granularity_score,
        )

    @staticmethod
    def _file_statistics(
        business_class: BusinessClass, test_class: Optional[TestClass]
    ) -> FileStatistics:
        return FileStatistics(
            file_path=business_class.file_path,
            class_name=business_class.class_name,
            fully_qualified_name=business_class.fully_qualified_name,
            package_name=business_class.package_name,
            kind=business_class.kind,
            corresponding_test_class=business_class.corresponding_test_class,
            has_test_class=test_class is not None,
        )
