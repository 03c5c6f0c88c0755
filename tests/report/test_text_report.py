"""Tests for the rich-rendered plain-text report."""

import pytest

from coverage_insight.jobs import AnalysisRequest, AnalysisService
from coverage_insight.report import render_report
from coverage_insight.report.text_report import MAX_UNCOVERED_ROWS


@pytest.fixture
def result(config, java_project):
    return AnalysisService(config).run(AnalysisRequest(project_path=str(java_project)))


class TestRenderReport:
    def test_sections_present(self, result):
        text = render_report(result)

        assert "Coverage Insight Report" in text
        assert "Project: shop (maven)" in text
        assert "Method coverage: 50.0% (2/4 methods)" in text
        assert "Covered classes: 1/2" in text
        assert "Average granularity: 47.5" in text
        assert "Git: not a repository" in text
        assert "Test Granularity" in text
        assert "Uncovered Methods (2)" in text
        assert "com.example.service.OrderService" in text

    def test_plain_text_without_markup(self, result):
        text = render_report(result)
        assert "[bold]" not in text
        assert "\x1b[" not in text

    def test_uncovered_ranked_by_complexity(self, result):
        text = render_report(result)
        # classify (complexity 5) is listed before total (complexity 3)
        assert text.index("classify(int)") < text.index("total(List<Double>, double)")

    def test_commit_table_omitted_without_history(self, result):
        assert "Commit Coverage" not in render_report(result)

    def test_fully_covered_project(self, config, java_project):
        service_dir = java_project / "src/main/java/com/example/service"
        (service_dir / "OrderService.java").unlink()
        calculator_test = java_project / "src/test/java/com/example/CalculatorTest.java"
        calculator_test.write_text(
            calculator_test.read_text(encoding="utf-8").replace(
                "void notATest()", "@Test\n    void testClassify()"
            ),
            encoding="utf-8",
        )

        result = AnalysisService(config).run(AnalysisRequest(project_path=str(java_project)))
        text = render_report(result)
        assert "Every public method has at least one test." in text
        assert "Method coverage: 100.0% (3/3 methods)" in text

    def test_uncovered_rows_are_capped(self, result):
        rows = result.coverage_report.uncovered
        template = rows[0]
        rows.extend([template] * (MAX_UNCOVERED_ROWS + 5))

        text = render_report(result)
        assert f"... and {len(rows) - MAX_UNCOVERED_ROWS} more" in text

    def test_skipped_files_listed(self, config, java_project):
        broken = java_project / "src/main/java/com/example/Broken.java"
        broken.write_text("class Broken {", encoding="utf-8")

        result = AnalysisService(config).run(AnalysisRequest(project_path=str(java_project)))
        text = render_report(result, width=300)
        assert "1 file(s) skipped:" in text
        assert "Broken.java" in text
