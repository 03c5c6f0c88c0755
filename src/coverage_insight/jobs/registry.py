"""Thread-safe job registry: progress records and results by job id."""

from __future__ import annotations

import threading
from typing import Optional

from ..logging_config import get_logger
from .models import AnalysisResult, JobStage, ProgressRecord

logger = get_logger(__name__)


class JobRegistry:
    """Holds progress and results for every job of this process.

    Thread-safe: the job thread writes via :meth:`advance` / :meth:`complete`
    / :meth:`fail`, request handlers read via :meth:`get_progress` and
    :meth:`get_result`. Progress records are immutable and swapped under
    the lock, so a reader sees either the old record or the new one.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._progress: dict[str, ProgressRecord] = {}
        self._results: dict[str, AnalysisResult] = {}

    def create(self, job_id: str) -> ProgressRecord:
        record = ProgressRecord.initial(job_id)
        with self._lock:
            self._progress[job_id] = record
        return record

    def advance(
        self, job_id: str, stage: JobStage, message: Optional[str] = None
    ) -> ProgressRecord:
        with self._lock:
            current = self._progress.get(job_id) or ProgressRecord.initial(job_id)
            record = current.advance(stage, message)
            self._progress[job_id] = record
        logger.info("Job %s: %s (%d%%)", job_id[:8], record.message, record.percent)
        return record

    def complete(self, job_id: str, result: AnalysisResult) -> None:
        with self._lock:
            self._results[job_id] = result
            current = self._progress.get(job_id) or ProgressRecord.initial(job_id)
            self._progress[job_id] = current.advance(JobStage.COMPLETED)
        logger.info("Job %s completed", job_id[:8])

    def fail(self, job_id: str, message: str) -> None:
        """Move the job to ERROR. No result is stored for a failed job."""
        with self._lock:
            self._results.pop(job_id, None)
            current = self._progress.get(job_id) or ProgressRecord.initial(job_id)
            self._progress[job_id] = current.advance(JobStage.ERROR, message)

    def get_progress(self, job_id: str) -> Optional[ProgressRecord]:
        with self._lock:
            return self._progress.get(job_id)

    def get_result(self, job_id: str) -> Optional[AnalysisResult]:
        with self._lock:
            return self._results.get(job_id)

    def job_ids(self) -> list[str]:
        with self._lock:
            return list(self._progress)

    def forget(self, job_id: str) -> bool:
        """Drop a job's progress and result; False if it was unknown."""
        with self._lock:
            known = job_id in self._progress or job_id in self._results
            self._progress.pop(job_id, None)
            self._results.pop(job_id, None)
        return known
