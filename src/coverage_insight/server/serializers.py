"""API serialization layer: domain models -> JSON-ready dicts.

Rules:
- Enums are emitted by value, datetimes as ISO-8601 strings.
- Percentages stay unrounded 0-100 floats; the client formats them.
- A business method lists its covering tests by name, not by value.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..jobs.models import AnalysisResult, ProgressRecord
from ..report.history import ReportEntry
from ..scanning.models import BusinessClass, BusinessMethod
from ..scanning.project_scanner import ProjectStructure


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums and paths to JSON types."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def serialize_progress(record: ProgressRecord) -> dict[str, Any]:
    return {
        "job_id": record.job_id,
        "stage": record.stage.value,
        "percent": record.percent,
        "message": record.message,
        "finished": record.is_finished,
        "started_at": record.started_at,
        "updated_at": record.updated_at,
    }


def serialize_method(method: BusinessMethod) -> dict[str, Any]:
    return {
        "name": method.name,
        "signature": method.signature,
        "return_type": method.return_type,
        "parameter_types": list(method.parameter_types),
        "start_line": method.start_line,
        "end_line": method.end_line,
        "complexity": method.complexity,
        "covered": method.covered,
        "granularity": method.granularity.value if method.granularity else None,
        "granularity_score": method.granularity_score,
        "covering_tests": [t.name for t in method.covering_tests],
    }


def serialize_business_class(business_class: BusinessClass) -> dict[str, Any]:
    return {
        "fully_qualified_name": business_class.fully_qualified_name,
        "class_name": business_class.class_name,
        "package_name": business_class.package_name,
        "file_path": business_class.file_path,
        "kind": business_class.kind.value,
        "corresponding_test_class": business_class.corresponding_test_class,
        "coverage_rate": business_class.coverage_rate,
        "methods": [serialize_method(m) for m in business_class.methods],
    }


def serialize_result(result: AnalysisResult) -> dict[str, Any]:
    history = result.git_history
    return {
        "job_id": result.job_id,
        "analyzed_at": result.analyzed_at,
        "summary": result.summary,
        "project": to_jsonable(result.project),
        "business_classes": [serialize_business_class(c) for c in result.business_classes],
        "test_classes": to_jsonable(result.test_classes),
        "coverage_report": to_jsonable(result.coverage_report),
        "git_statistics": {
            "is_repository": history.is_repository,
            "total_commits": history.total_commits,
            "total_developers": history.total_developers,
            "since": to_jsonable(history.since),
            "until": to_jsonable(history.until),
            "developers": to_jsonable(list(history.developers.values())),
            "commits": [
                {
                    "hash": c.hash,
                    "short_hash": c.short_hash,
                    "author_name": c.author_name,
                    "author_email": c.author_email,
                    "timestamp": c.timestamp,
                    "message": c.message,
                    "lines_added": c.lines_added,
                    "lines_deleted": c.lines_deleted,
                    "changes": to_jsonable(c.changes),
                }
                for c in history.commits
            ],
        },
        "warnings": list(result.warnings),
    }


def serialize_structure(structure: ProjectStructure) -> dict[str, Any]:
    data = to_jsonable(structure)
    data["source_file_count"] = len(structure.source_files)
    return data


def serialize_report_entry(entry: ReportEntry) -> dict[str, Any]:
    return to_jsonable(entry)
