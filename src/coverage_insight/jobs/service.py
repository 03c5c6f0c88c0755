"""AnalysisService: the job-level facade used by the CLI and the HTTP API."""

from __future__ import annotations

import threading
import uuid
from typing import Optional, Union

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..exceptions import CoverageInsightError, InvalidRequestError, ReportNotFoundError
from ..logging_config import get_logger
from ..report.history import ReportEntry, ReportHistoryDB
from ..report.text_report import render_report
from ..scanning.project_scanner import ProjectScanner, ProjectStructure
from ..temporal.git_extractor import GitExtractor
from .models import AnalysisRequest, AnalysisResult, JobStage, ProgressRecord
from .pipeline import AnalysisPipeline, StageCallback
from .registry import JobRegistry

logger = get_logger(__name__)


def _require(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidRequestError(field_name, "must not be empty")
    return str(value).strip()


def validate_request(request: AnalysisRequest) -> None:
    """Reject malformed input before any job exists.

    Raises:
        InvalidRequestError: Empty project path or an inverted history window
    """
    _require(request.project_path, "project_path")
    since, until = request.since, request.until
    # timestamp() compares naive (local) and aware datetimes alike
    if since and until and since.timestamp() > until.timestamp():
        raise InvalidRequestError("since", "must not be later than until")


class AnalysisService:
    """Submits analysis jobs and serves their progress, results and reports.

    Each submitted job runs on its own daemon thread and is never joined;
    callers poll :meth:`get_progress` and :meth:`get_result`. A job that
    fails ends in the ERROR stage with its message and no result.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        registry: Optional[JobRegistry] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.registry = registry or JobRegistry()

    # ── jobs ──────────────────────────────────────────────────────

    def submit(self, request: AnalysisRequest) -> str:
        """Start an analysis job and return its id immediately."""
        validate_request(request)
        job_id = str(uuid.uuid4())
        self.registry.create(job_id)
        thread = threading.Thread(
            target=self._run_job,
            args=(job_id, request),
            name=f"coverage-insight-job-{job_id[:8]}",
            daemon=True,
        )
        thread.start()
        logger.info("Submitted job %s for %s", job_id[:8], request.project_path)
        return job_id

    def run(
        self, request: AnalysisRequest, on_stage: Optional[StageCallback] = None
    ) -> AnalysisResult:
        """Run the pipeline on the calling thread; errors propagate."""
        validate_request(request)
        return AnalysisPipeline(self.config, on_stage).run(str(uuid.uuid4()), request)

    def get_progress(self, job_id: str) -> Optional[ProgressRecord]:
        return self.registry.get_progress(_require(job_id, "job_id"))

    def get_result(self, job_id: str) -> Optional[AnalysisResult]:
        return self.registry.get_result(_require(job_id, "job_id"))

    def _run_job(self, job_id: str, request: AnalysisRequest) -> None:
        def on_stage(stage: JobStage, message: str) -> None:
            self.registry.advance(job_id, stage, message)

        try:
            result = AnalysisPipeline(self.config, on_stage).run(job_id, request)
        except CoverageInsightError as e:
            logger.error("Job %s failed: %s", job_id[:8], e)
            self.registry.fail(job_id, f"Analysis failed: {e}")
            return
        except Exception as e:
            logger.exception("Job %s crashed", job_id[:8])
            self.registry.fail(job_id, f"Analysis failed: {type(e).__name__}: {e}")
            return
        self.registry.complete(job_id, result)

    # ── project / git ─────────────────────────────────────────────

    def scan_project(self, project_path: str) -> ProjectStructure:
        return ProjectScanner(self.config).scan(_require(project_path, "project_path"))

    def get_commit_diff(self, project_path: str, commit_hash: str) -> str:
        """Header, changed files and patch of one commit; errors come back as text."""
        path = _require(project_path, "project_path")
        commit = _require(commit_hash, "commit_hash")
        return GitExtractor(path, self.config).commit_diff_text(commit)

    # ── reports ───────────────────────────────────────────────────

    def render_report(self, job_or_result: Union[str, AnalysisResult]) -> str:
        return render_report(self._resolve_result(job_or_result))

    def save_report(self, job_or_result: Union[str, AnalysisResult]) -> ReportEntry:
        """Render the job's report into ``report_dir`` and record it in history."""
        result = self._resolve_result(job_or_result)
        with ReportHistoryDB(self.config.report_dir) as db:
            return db.add(
                report_id=result.job_id,
                project_name=result.project.name,
                project_path=result.project.path,
                summary=result.summary,
                overall_coverage=result.coverage_report.overall_coverage,
                text=render_report(result),
            )

    def list_history(self) -> list[list[str]]:
        """``[[id, summary], ...]`` for every saved report, newest first."""
        with ReportHistoryDB(self.config.report_dir) as db:
            return [[entry.id, entry.summary] for entry in db.list()]

    def delete_history(self, report_id: str) -> bool:
        """Delete a saved report and drop the in-memory job it came from."""
        report_id = _require(report_id, "report_id")
        with ReportHistoryDB(self.config.report_dir) as db:
            deleted = db.delete(report_id)
        forgotten = self.registry.forget(report_id)
        return deleted or forgotten

    def _resolve_result(self, job_or_result: Union[str, AnalysisResult]) -> AnalysisResult:
        if isinstance(job_or_result, AnalysisResult):
            return job_or_result
        job_id = _require(job_or_result, "job_id")
        result = self.registry.get_result(job_id)
        if result is None:
            raise ReportNotFoundError(job_id)
        return result
