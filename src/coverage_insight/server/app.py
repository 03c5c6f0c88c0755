"""Starlette ASGI application exposing the analysis service."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from ..exceptions import ConfigurationError, InvalidRequestError, ReportError, ReportNotFoundError
from ..jobs.models import AnalysisRequest
from ..jobs.service import AnalysisService
from .serializers import (
    serialize_progress,
    serialize_report_entry,
    serialize_result,
    serialize_structure,
)

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _parse_datetime(payload: dict[str, Any], key: str) -> Optional[datetime]:
    raw = payload.get(key)
    if raw in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        raise InvalidRequestError(key, "must be an ISO-8601 date or datetime")


def _parse_roots(payload: dict[str, Any], key: str) -> list[str]:
    raw = payload.get(key) or []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(r, str) for r in raw):
        raise InvalidRequestError(key, "must be a list of paths")
    return raw


def parse_analysis_request(payload: Any) -> AnalysisRequest:
    """Build an AnalysisRequest from a JSON body.

    Raises:
        InvalidRequestError: If the body is not an object or a field is malformed
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("body", "must be a JSON object")
    return AnalysisRequest(
        project_path=str(payload.get("project_path") or ""),
        source_roots=_parse_roots(payload, "source_roots"),
        test_roots=_parse_roots(payload, "test_roots"),
        since=_parse_datetime(payload, "since"),
        until=_parse_datetime(payload, "until"),
    )


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise InvalidRequestError("body", "must be valid JSON")


def create_app(service: AnalysisService) -> Starlette:
    """Build the Starlette application wired to *service*."""

    async def api_submit(request: Request) -> JSONResponse:
        """Start an analysis job. POST /api/analysis"""
        try:
            analysis_request = parse_analysis_request(await _json_body(request))
            job_id = service.submit(analysis_request)
        except InvalidRequestError as e:
            return _error(str(e), 400)
        return JSONResponse({"job_id": job_id}, status_code=202)

    async def api_progress(request: Request) -> JSONResponse:
        job_id = request.path_params["job_id"]
        record = service.get_progress(job_id)
        if record is None:
            return _error(f"Job not found: {job_id}", 404)
        return JSONResponse(serialize_progress(record))

    async def api_result(request: Request) -> JSONResponse:
        job_id = request.path_params["job_id"]
        result = service.get_result(job_id)
        if result is None:
            record = service.get_progress(job_id)
            if record is not None and not record.is_finished:
                return JSONResponse(serialize_progress(record), status_code=202)
            return _error(f"Result not found: {job_id}", 404)
        return JSONResponse(serialize_result(result))

    async def api_report(request: Request) -> PlainTextResponse | JSONResponse:
        job_id = request.path_params["job_id"]
        try:
            text = await run_in_threadpool(service.render_report, job_id)
        except ReportNotFoundError as e:
            return _error(str(e), 404)
        return PlainTextResponse(text)

    async def api_save_report(request: Request) -> JSONResponse:
        job_id = request.path_params["job_id"]
        try:
            entry = await run_in_threadpool(service.save_report, job_id)
        except ReportNotFoundError as e:
            return _error(str(e), 404)
        except ReportError as e:
            logger.warning("Saving report %s failed: %s", job_id, e)
            return _error(str(e), 500)
        return JSONResponse(serialize_report_entry(entry), status_code=201)

    async def api_commit_diff(request: Request) -> PlainTextResponse | JSONResponse:
        """Best-effort diff text. GET /api/commits/{hash}/diff?project=..."""
        commit_hash = request.path_params["commit_hash"]
        project = request.query_params.get("project", "")
        try:
            text = await run_in_threadpool(service.get_commit_diff, project, commit_hash)
        except InvalidRequestError as e:
            return _error(str(e), 400)
        return PlainTextResponse(text)

    async def api_reports(request: Request) -> JSONResponse:
        try:
            reports = await run_in_threadpool(service.list_history)
        except ReportError as e:
            return _error(str(e), 500)
        return JSONResponse({"reports": reports})

    async def api_delete_report(request: Request) -> JSONResponse:
        report_id = request.path_params["report_id"]
        try:
            deleted = await run_in_threadpool(service.delete_history, report_id)
        except ReportError as e:
            return _error(str(e), 500)
        if not deleted:
            return _error(f"Report not found: {report_id}", 404)
        return JSONResponse({"deleted": True})

    async def api_scan(request: Request) -> JSONResponse:
        """Describe a project's layout. POST /api/projects/scan"""
        try:
            payload = await _json_body(request)
            if not isinstance(payload, dict):
                raise InvalidRequestError("body", "must be a JSON object")
            structure = await run_in_threadpool(
                service.scan_project, str(payload.get("project_path") or "")
            )
        except ConfigurationError as e:
            return _error(str(e), 400)
        return JSONResponse(serialize_structure(structure))

    routes = [
        Route("/api/analysis", api_submit, methods=["POST"]),
        Route("/api/analysis/{job_id}/progress", api_progress),
        Route("/api/analysis/{job_id}/result", api_result),
        Route("/api/analysis/{job_id}/report", api_report),
        Route("/api/analysis/{job_id}/save", api_save_report, methods=["POST"]),
        Route("/api/commits/{commit_hash}/diff", api_commit_diff),
        Route("/api/reports", api_reports),
        Route("/api/reports/{report_id}", api_delete_report, methods=["DELETE"]),
        Route("/api/projects/scan", api_scan, methods=["POST"]),
    ]

    return Starlette(routes=routes)
