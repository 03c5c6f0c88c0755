"""Source-file enumeration under project roots."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from ..logging_config import get_logger

logger = get_logger(__name__)


def should_skip_dir(name: str, skip_dirs: Iterable[str]) -> bool:
    """Hidden directories and build output are never descended into."""
    return name.startswith(".") or name in set(skip_dirs)


def iter_source_files(root: Path, extension: str, skip_dirs: Iterable[str]) -> Iterator[Path]:
    """Yield files under ``root`` ending in ``extension``, in sorted order.

    Directory order is sorted so that repeated runs see files in the same
    sequence.
    """
    skip = set(skip_dirs)
    if not root.is_dir():
        logger.debug("Root %s is not a directory, nothing to enumerate", root)
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not should_skip_dir(d, skip))
        for filename in sorted(filenames):
            if filename.endswith(extension):
                yield Path(dirpath) / filename


def resolve_roots(project_path: Path, roots: Iterable[str]) -> list[Path]:
    """Resolve root selections relative to the project, dropping duplicates."""
    resolved: list[Path] = []
    seen: set[Path] = set()
    for root in roots:
        candidate = Path(root)
        if not candidate.is_absolute():
            candidate = project_path / candidate
        candidate = candidate.resolve()
        if candidate not in seen:
            seen.add(candidate)
            resolved.append(candidate)
    return resolved


def _log_walk_error(error: OSError) -> None:
    logger.warning("Cannot list directory %s: %s", error.filename, error.strerror)
