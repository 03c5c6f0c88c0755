"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..logging_config import setup_logging

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    max_commits: Optional[int] = None,
    report_dir: Optional[Path] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> AnalysisConfig:
    """Build config from CLI options and install logging to match."""
    overrides = {}
    if max_commits is not None:
        overrides["git_max_commits"] = max_commits
    if report_dir is not None:
        overrides["report_dir"] = str(report_dir)
    if workers is not None:
        overrides["max_workers"] = workers
    if timeout is not None:
        overrides["job_timeout_seconds"] = timeout
    settings = load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)
    setup_logging(settings.verbosity, log_file=log_file)
    return settings
