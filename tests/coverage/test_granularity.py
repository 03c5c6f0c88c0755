"""Tests for granularity scoring."""

import itertools

import pytest

from coverage_insight.coverage.granularity import (
    GranularityLevel,
    assertion_points,
    score_method,
    score_pair,
)
from coverage_insight.scanning.models import BusinessMethod, TestMethod


def make_method(name: str = "calculate", complexity: int = 1) -> BusinessMethod:
    return BusinessMethod(
        class_name="Calculator",
        name=name,
        parameter_types=["int"],
        return_type="int",
        start_line=10,
        end_line=20,
        complexity=complexity,
    )


def make_test(name: str, tested: str = "", **flags) -> TestMethod:
    return TestMethod(test_class="CalculatorTest", name=name, tested_method=tested, **flags)


class TestScenarios:
    def test_naming_and_assertions(self):
        """testCalculate_Success with 3 assertions -> 50, ACCEPTABLE."""
        method = make_method()
        test = make_test("testCalculate_Success", "calculate", assertion_count=3)

        score = score_method(method, [test])
        assert score == 50
        assert GranularityLevel.from_score(score) is GranularityLevel.ACCEPTABLE

    def test_boundary_flag(self):
        """testCalculateBoundary with 3 assertions and boundary -> 75, GOOD."""
        method = make_method()
        test = make_test(
            "testCalculateBoundary", "calculateBoundary", assertion_count=3, is_boundary_test=True
        )

        score = score_method(method, [test])
        assert score == 75
        assert GranularityLevel.from_score(score) is GranularityLevel.GOOD

    def test_no_covering_tests(self):
        score = score_method(make_method(), [])
        assert score == 0
        assert GranularityLevel.from_score(score) is GranularityLevel.POOR


class TestScorePair:
    def test_inferred_name_scores_lower_than_containment(self):
        method = make_method("add")
        # "testSum" does not contain "add"; inferred name is set explicitly
        assert score_pair(method, make_test("testSum", "add")) == 15
        assert score_pair(method, make_test("testAdd", "add")) == 20

    def test_empty_inferred_name_never_matches(self):
        assert score_pair(make_method("add"), make_test("shouldSum", "")) == 0

    def test_mock_points_depend_on_complexity(self):
        test = make_test("testCalculate", "calculate", uses_mocks=True)
        assert score_pair(make_method(complexity=3), test) == 25
        assert score_pair(make_method(complexity=4), test) == 30

    def test_all_dimensions_max_out_at_100(self):
        test = make_test(
            "testCalculate",
            "calculate",
            assertion_count=5,
            is_boundary_test=True,
            is_exception_test=True,
            uses_mocks=True,
        )
        assert score_pair(make_method(complexity=9), test) == 100

    @pytest.mark.parametrize("count,points", [(0, 0), (1, 10), (2, 20), (3, 30), (12, 30)])
    def test_assertion_tiers(self, count, points):
        assert assertion_points(count) == points


class TestScoreMethod:
    def test_integer_mean_truncates(self):
        method = make_method()
        tests = [
            make_test("testCalculate", assertion_count=1),  # 30
            make_test("testCalculateTwice", assertion_count=2),  # 40
            make_test("testCalculateLimit", assertion_count=2, is_boundary_test=True),  # 65
        ]
        # (30 + 40 + 65) / 3 = 45.0
        assert score_method(method, tests) == 45
        # (30 + 40 + 65 + 20) / 4 = 38.75
        assert score_method(method, tests + [make_test("testCalculateX")]) == 38

    def test_order_independent(self):
        method = make_method()
        tests = [
            make_test("testCalculate", assertion_count=1),
            make_test("testCalculateEdge", is_boundary_test=True),
            make_test("testCalculateError", assertion_count=3, is_exception_test=True),
        ]
        scores = {score_method(method, list(p)) for p in itertools.permutations(tests)}
        assert len(scores) == 1


class TestGranularityLevel:
    @pytest.mark.parametrize(
        "score,level",
        [
            (100, GranularityLevel.EXCELLENT),
            (80, GranularityLevel.EXCELLENT),
            (79, GranularityLevel.GOOD),
            (60, GranularityLevel.GOOD),
            (59, GranularityLevel.ACCEPTABLE),
            (40, GranularityLevel.ACCEPTABLE),
            (39, GranularityLevel.POOR),
            (0, GranularityLevel.POOR),
        ],
    )
    def test_thresholds(self, score, level):
        assert GranularityLevel.from_score(score) is level

    def test_monotonic(self):
        order = [
            GranularityLevel.POOR,
            GranularityLevel.ACCEPTABLE,
            GranularityLevel.GOOD,
            GranularityLevel.EXCELLENT,
        ]
        ranks = [order.index(GranularityLevel.from_score(s)) for s in range(101)]
        assert ranks == sorted(ranks)
