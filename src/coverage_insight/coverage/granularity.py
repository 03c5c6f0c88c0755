"""Granularity scoring: how thoroughly a test exercises a business method.

Each (method, test) pair earns points on five independent dimensions:

    naming       20  test name contains the method name
                 15  otherwise, inferred tested method equals the method name
    assertions   30 / 20 / 10  for >= 3 / 2 / 1 assertions
    boundary     25  boundary-test flag
    exception    15  exception-test flag
    mocks        10  mock flag and method complexity > 3
                  5  mock flag and complexity <= 3

A method's score is the integer mean over its covering tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from ..scanning.models import BusinessMethod, TestMethod

NAMING_CONTAINS_POINTS = 20
NAMING_INFERRED_POINTS = 15
ASSERTION_TIERS: tuple[tuple[int, int], ...] = ((3, 30), (2, 20), (1, 10))
BOUNDARY_POINTS = 25
EXCEPTION_POINTS = 15
MOCK_COMPLEX_POINTS = 10
MOCK_SIMPLE_POINTS = 5
MOCK_COMPLEXITY_THRESHOLD = 3


class GranularityLevel(str, Enum):
    """Quality tier for a 0-100 granularity score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"

    @property
    def min_score(self) -> int:
        return _MIN_SCORES[self]

    @classmethod
    def from_score(cls, score: int) -> GranularityLevel:
        """Highest tier whose threshold the score reaches."""
        for level in (cls.EXCELLENT, cls.GOOD, cls.ACCEPTABLE):
            if score >= level.min_score:
                return level
        return cls.POOR


_MIN_SCORES = {
    GranularityLevel.EXCELLENT: 80,
    GranularityLevel.GOOD: 60,
    GranularityLevel.ACCEPTABLE: 40,
    GranularityLevel.POOR: 0,
}


def names_contain(test_name: str, method_name: str) -> bool:
    """Case-insensitive containment of the method name in the test name."""
    return method_name.lower() in test_name.lower()


def inferred_name_matches(test: TestMethod, method_name: str) -> bool:
    return bool(test.tested_method) and test.tested_method.lower() == method_name.lower()


def naming_points(method: BusinessMethod, test: TestMethod) -> int:
    if names_contain(test.name, method.name):
        return NAMING_CONTAINS_POINTS
    if inferred_name_matches(test, method.name):
        return NAMING_INFERRED_POINTS
    return 0


def assertion_points(assertion_count: int) -> int:
    for minimum, points in ASSERTION_TIERS:
        if assertion_count >= minimum:
            return points
    return 0


def mock_points(method: BusinessMethod, test: TestMethod) -> int:
    if not test.uses_mocks:
        return 0
    if method.complexity > MOCK_COMPLEXITY_THRESHOLD:
        return MOCK_COMPLEX_POINTS
    return MOCK_SIMPLE_POINTS


def score_pair(method: BusinessMethod, test: TestMethod) -> int:
    """Granularity score (0-100) of one covering test for one method."""
    score = naming_points(method, test)
    score += assertion_points(test.assertion_count)
    if test.is_boundary_test:
        score += BOUNDARY_POINTS
    if test.is_exception_test:
        score += EXCEPTION_POINTS
    score += mock_points(method, test)
    return score


def score_method(method: BusinessMethod, tests: Iterable[TestMethod]) -> int:
    """Integer mean of pair scores; 0 when there are no covering tests."""
    scores = [score_pair(method, test) for test in tests]
    if not scores:
        return 0
    return sum(scores) // len(scores)
