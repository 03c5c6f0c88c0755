"""Tests for jobs.registry.JobRegistry and the stage model."""

import threading

import pytest

from coverage_insight.jobs import JobStage
from coverage_insight.jobs.models import ProgressRecord
from coverage_insight.jobs.registry import JobRegistry


class TestJobStage:
    def test_percentages_follow_stage_order(self):
        running = [s for s in JobStage if s is not JobStage.ERROR]
        percents = [s.percent for s in running]
        assert percents == sorted(percents)
        assert percents[0] == 0
        assert percents[-1] == 100

    def test_terminal_stages(self):
        assert JobStage.COMPLETED.is_terminal
        assert JobStage.ERROR.is_terminal
        assert not JobStage.ANALYZING_GIT.is_terminal


class TestProgressRecord:
    def test_advance_returns_new_record(self):
        first = ProgressRecord.initial("job-1")
        second = first.advance(JobStage.ANALYZING_TESTS)

        assert first.stage is JobStage.INITIALIZING
        assert second.stage is JobStage.ANALYZING_TESTS
        assert second.percent == 50
        assert second.message == "Analyzing test code"
        assert second.started_at == first.started_at
        assert not second.is_finished

    def test_records_are_immutable(self):
        record = ProgressRecord.initial("job-1")
        with pytest.raises(AttributeError):
            record.percent = 42


class TestJobRegistry:
    def test_create_starts_initializing(self):
        registry = JobRegistry()
        registry.create("job-1")
        progress = registry.get_progress("job-1")
        assert progress.stage is JobStage.INITIALIZING
        assert progress.percent == 0
        assert registry.get_result("job-1") is None

    def test_unknown_job(self):
        registry = JobRegistry()
        assert registry.get_progress("nope") is None
        assert registry.get_result("nope") is None
        assert not registry.forget("nope")

    def test_advance_with_custom_message(self):
        registry = JobRegistry()
        registry.create("job-1")
        registry.advance("job-1", JobStage.SCANNING, "Looking around")
        progress = registry.get_progress("job-1")
        assert (progress.stage, progress.percent, progress.message) == (
            JobStage.SCANNING,
            10,
            "Looking around",
        )

    def test_fail_keeps_no_result(self):
        registry = JobRegistry()
        registry.create("job-1")
        registry.fail("job-1", "Analysis failed: boom")

        progress = registry.get_progress("job-1")
        assert progress.stage is JobStage.ERROR
        assert progress.message == "Analysis failed: boom"
        assert progress.is_finished
        assert registry.get_result("job-1") is None

    def test_forget(self):
        registry = JobRegistry()
        registry.create("job-1")
        assert registry.job_ids() == ["job-1"]
        assert registry.forget("job-1")
        assert registry.get_progress("job-1") is None
        assert registry.job_ids() == []

    def test_concurrent_advances(self):
        """Readers always see a whole record while writers swap them."""
        registry = JobRegistry()
        registry.create("job-1")
        errors = []
        stages = [s for s in JobStage if not s.is_terminal]

        def writer():
            try:
                for _ in range(50):
                    for stage in stages:
                        registry.advance("job-1", stage)
            except Exception as e:
                errors.append(e)

        def reader():
            try:
                for _ in range(500):
                    record = registry.get_progress("job-1")
                    assert record.percent == record.stage.percent
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer) for _ in range(2)]
        threads += [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
