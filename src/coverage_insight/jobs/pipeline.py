"""Analysis pipeline: one project snapshot -> one AnalysisResult.

Stages run strictly in order and report through ``on_stage``. The three
extractions (business code, test code, git history) have no dependency on
each other, so they are started together on a thread pool and joined at
their respective stages.
"""

from __future__ import annotations

import concurrent.futures
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, TypeVar

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..coverage.commit_impact import CommitImpactAnalyzer
from ..coverage.matcher import CoverageMatcher
from ..exceptions import JobTimeoutError
from ..logging_config import get_logger
from ..scanning.business_extractor import BusinessExtractor
from ..scanning.files import resolve_roots
from ..scanning.project_scanner import ProjectScanner, ProjectStructure
from ..scanning.test_extractor import TestExtractor
from ..temporal.git_extractor import GitExtractor
from .models import AnalysisRequest, AnalysisResult, JobStage, ProjectInfo

logger = get_logger(__name__)

T = TypeVar("T")

StageCallback = Callable[[JobStage, str], None]


def _ignore_stage(stage: JobStage, message: str) -> None:
    pass


class AnalysisPipeline:
    """Runs every analysis stage for one request.

    Exceptions propagate to the caller; turning them into an ERROR state is
    the job runner's concern. When ``config.job_timeout_seconds`` is set the
    elapsed time is checked at every stage boundary and JobTimeoutError is
    raised once it is exceeded. A stage already running is not interrupted.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        on_stage: Optional[StageCallback] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.on_stage = on_stage or _ignore_stage
        self._job_id = ""
        self._started = 0.0

    def run(self, job_id: str, request: AnalysisRequest) -> AnalysisResult:
        self._job_id = job_id
        self._started = time.monotonic()

        self._enter(JobStage.SCANNING)
        structure = ProjectScanner(self.config).scan(request.project_path)
        project_root = Path(structure.project_path)
        source_roots = resolve_roots(
            project_root, request.source_roots or structure.source_roots
        )
        test_roots = resolve_roots(project_root, request.test_roots or structure.test_roots)
        if not source_roots:
            logger.warning("No source roots for %s; business code is empty", project_root)

        business_extractor = BusinessExtractor(self.config)
        test_extractor = TestExtractor(self.config)
        git_extractor = GitExtractor(structure.project_path, self.config)

        executor = ThreadPoolExecutor(
            max_workers=min(3, self.config.workers), thread_name_prefix="coverage-insight"
        )
        try:
            business_future = executor.submit(business_extractor.extract_all, source_roots)
            tests_future = executor.submit(test_extractor.extract_all, test_roots)
            git_future = executor.submit(git_extractor.extract, request.since, request.until)

            self._enter(JobStage.ANALYZING_BUSINESS)
            business_classes = self._join(business_future)

            self._enter(JobStage.ANALYZING_TESTS)
            test_classes = self._join(tests_future)

            self._enter(JobStage.ANALYZING_GIT)
            history = self._join(git_future)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        self._enter(JobStage.ANALYZING_COVERAGE)
        report = CoverageMatcher().analyze(business_classes, test_classes)

        if history.total_commits > 0:
            self._enter(JobStage.ANALYZING_COMMIT_STATS)
            report.commit_statistics = CommitImpactAnalyzer(
                business_classes, test_classes
            ).analyze_all(history.commits)

        self._enter(JobStage.GENERATING_REPORT)
        return AnalysisResult(
            job_id=job_id,
            project=project_info(structure),
            business_classes=business_classes,
            test_classes=test_classes,
            coverage_report=report,
            git_history=history,
            warnings=business_extractor.warnings + test_extractor.warnings,
        )

    # ── internals ─────────────────────────────────────────────────

    def _enter(self, stage: JobStage) -> None:
        self._check_deadline()
        self.on_stage(stage, stage.default_message)

    def _remaining(self) -> Optional[float]:
        limit = self.config.job_timeout_seconds
        if limit is None:
            return None
        return max(0.0, limit - (time.monotonic() - self._started))

    def _check_deadline(self) -> None:
        limit = self.config.job_timeout_seconds
        if limit is None:
            return
        elapsed = time.monotonic() - self._started
        if elapsed > limit:
            raise JobTimeoutError(self._job_id, elapsed, limit)

    def _join(self, future: Future[T]) -> T:
        try:
            return future.result(timeout=self._remaining())
        except concurrent.futures.TimeoutError:
            raise JobTimeoutError(
                self._job_id,
                time.monotonic() - self._started,
                self.config.job_timeout_seconds or 0.0,
            )


def project_info(structure: ProjectStructure) -> ProjectInfo:
    return ProjectInfo(
        name=structure.project_name,
        path=structure.project_path,
        project_type=structure.project_type,
    )
