"""Job-level models: stages, progress records, requests and results."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from ..coverage.models import CoverageReport
from ..scanning.models import BusinessClass, TestClass
from ..scanning.project_scanner import ProjectType
from ..temporal.models import GitHistory


class JobStage(str, Enum):
    """Pipeline stages in execution order; ERROR is reachable from any stage."""

    INITIALIZING = "initializing"
    SCANNING = "scanning"
    ANALYZING_BUSINESS = "analyzing_business"
    ANALYZING_TESTS = "analyzing_tests"
    ANALYZING_GIT = "analyzing_git"
    ANALYZING_COVERAGE = "analyzing_coverage"
    ANALYZING_COMMIT_STATS = "analyzing_commit_stats"
    GENERATING_REPORT = "generating_report"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def percent(self) -> int:
        return _STAGE_INFO[self][0]

    @property
    def default_message(self) -> str:
        return _STAGE_INFO[self][1]

    @property
    def is_terminal(self) -> bool:
        return self in (JobStage.COMPLETED, JobStage.ERROR)


_STAGE_INFO: dict[JobStage, tuple[int, str]] = {
    JobStage.INITIALIZING: (0, "Initializing analysis"),
    JobStage.SCANNING: (10, "Scanning project structure"),
    JobStage.ANALYZING_BUSINESS: (30, "Analyzing business code"),
    JobStage.ANALYZING_TESTS: (50, "Analyzing test code"),
    JobStage.ANALYZING_GIT: (70, "Analyzing git history"),
    JobStage.ANALYZING_COVERAGE: (85, "Computing coverage"),
    JobStage.ANALYZING_COMMIT_STATS: (90, "Computing per-commit coverage"),
    JobStage.GENERATING_REPORT: (95, "Generating report"),
    JobStage.COMPLETED: (100, "Analysis completed"),
    JobStage.ERROR: (0, "Analysis failed"),
}


@dataclass(frozen=True)
class ProgressRecord:
    """Snapshot of a job's progress. Replaced wholesale, never mutated."""

    job_id: str
    stage: JobStage
    percent: int
    message: str
    started_at: float
    updated_at: float

    @classmethod
    def initial(cls, job_id: str) -> ProgressRecord:
        now = time.time()
        return cls(
            job_id=job_id,
            stage=JobStage.INITIALIZING,
            percent=JobStage.INITIALIZING.percent,
            message=JobStage.INITIALIZING.default_message,
            started_at=now,
            updated_at=now,
        )

    def advance(self, stage: JobStage, message: Optional[str] = None) -> ProgressRecord:
        return replace(
            self,
            stage=stage,
            percent=stage.percent,
            message=message or stage.default_message,
            updated_at=time.time(),
        )

    @property
    def is_finished(self) -> bool:
        return self.stage.is_terminal


@dataclass
class AnalysisRequest:
    """What to analyze.

    Empty ``source_roots`` / ``test_roots`` fall back to the roots found by
    the project scanner. Relative roots are resolved against the project.
    """

    project_path: str
    source_roots: list[str] = field(default_factory=list)
    test_roots: list[str] = field(default_factory=list)
    since: Optional[datetime] = None
    until: Optional[datetime] = None


@dataclass(frozen=True)
class ProjectInfo:
    name: str
    path: str
    project_type: ProjectType


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one completed job produced, keyed by ``job_id``."""

    job_id: str
    project: ProjectInfo
    business_classes: list[BusinessClass]
    test_classes: list[TestClass]
    coverage_report: CoverageReport
    git_history: GitHistory
    warnings: list[str] = field(default_factory=list)
    analyzed_at: float = field(default_factory=time.time)

    @property
    def summary(self) -> str:
        """One-line description used in report history."""
        report = self.coverage_report
        return (
            f"{self.project.name}: {report.overall_coverage:.1f}% method coverage "
            f"({report.covered_methods}/{report.total_methods}), "
            f"{self.git_history.total_commits} commits"
        )
