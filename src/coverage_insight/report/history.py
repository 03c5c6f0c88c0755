"""SQLite-backed report history stored beside the saved report files."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..exceptions import ReportError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ReportEntry:
    id: str
    project_name: str
    project_path: str
    summary: str
    overall_coverage: float
    created_at: str
    report_file: str


class ReportHistoryDB:
    """Manages ``<report_dir>/history.db`` and the report files next to it.

    Usage::

        with ReportHistoryDB(config.report_dir) as db:
            entries = db.list()
    """

    def __init__(self, report_dir: str) -> None:
        self.report_dir: Path = Path(report_dir)
        self.db_path: Path = self.report_dir / "history.db"
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError(
                "ReportHistoryDB is not connected. Use as context manager or call connect()."
            )
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations."""
        try:
            self.report_dir.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise ReportError(
                f"Cannot open report history at {self.db_path}", details={"reason": str(e)}
            )
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Report history connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "ReportHistoryDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create all tables."""
        c = self.conn
        c.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
        if c.execute("SELECT version FROM schema_version").fetchone() is None:
            c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))

        c.execute(
            """
            CREATE TABLE IF NOT EXISTS reports (
                id               TEXT PRIMARY KEY,
                project_name     TEXT NOT NULL,
                project_path     TEXT NOT NULL,
                summary          TEXT NOT NULL,
                overall_coverage REAL NOT NULL DEFAULT 0,
                created_at       TEXT NOT NULL,
                report_file      TEXT NOT NULL
            )
            """
        )
        c.execute("CREATE INDEX IF NOT EXISTS idx_reports_created ON reports(created_at)")
        c.commit()

    # ── reports ───────────────────────────────────────────────────

    def add(
        self,
        report_id: str,
        project_name: str,
        project_path: str,
        summary: str,
        overall_coverage: float,
        text: str,
    ) -> ReportEntry:
        """Write the report file and record it. Saving an id again replaces it."""
        created_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        report_file = self.report_dir / f"{_safe_name(project_name)}-{report_id[:8]}.txt"
        try:
            report_file.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ReportError(f"Cannot write report {report_file}", details={"reason": str(e)})

        entry = ReportEntry(
            id=report_id,
            project_name=project_name,
            project_path=project_path,
            summary=summary,
            overall_coverage=overall_coverage,
            created_at=created_at,
            report_file=str(report_file),
        )
        self.conn.execute(
            "INSERT OR REPLACE INTO reports "
            "(id, project_name, project_path, summary, overall_coverage, created_at, report_file) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                entry.id,
                entry.project_name,
                entry.project_path,
                entry.summary,
                entry.overall_coverage,
                entry.created_at,
                entry.report_file,
            ),
        )
        self.conn.commit()
        logger.info("Saved report %s to %s", report_id[:8], report_file)
        return entry

    def get(self, report_id: str) -> Optional[ReportEntry]:
        row = self.conn.execute("SELECT * FROM reports WHERE id = ?", (report_id,)).fetchone()
        return _entry(row) if row is not None else None

    def list(self) -> list[ReportEntry]:
        """All saved reports, newest first."""
        rows = self.conn.execute("SELECT * FROM reports ORDER BY created_at DESC, id").fetchall()
        return [_entry(row) for row in rows]

    def delete(self, report_id: str) -> bool:
        """Remove the row and its report file. False if the id is unknown."""
        entry = self.get(report_id)
        if entry is None:
            return False
        self.conn.execute("DELETE FROM reports WHERE id = ?", (report_id,))
        self.conn.commit()
        try:
            Path(entry.report_file).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Cannot remove report file %s: %s", entry.report_file, e)
        logger.info("Deleted report %s", report_id[:8])
        return True


def _entry(row: sqlite3.Row) -> ReportEntry:
    return ReportEntry(
        id=row["id"],
        project_name=row["project_name"],
        project_path=row["project_path"],
        summary=row["summary"],
        overall_coverage=float(row["overall_coverage"]),
        created_at=row["created_at"],
        report_file=row["report_file"],
    )


def _safe_name(name: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in name)
    return cleaned or "project"
