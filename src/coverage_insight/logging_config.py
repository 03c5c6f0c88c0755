"""Logging for Coverage Insight.

Terminal output goes through rich on stderr so it never mixes with a
report printed to stdout. Each analysis job runs on its own
``coverage-insight-job-<id>`` thread and fans out to
``coverage-insight_<n>`` pool threads, so log lines carry the thread name
wherever several jobs can interleave.

Usage:
    setup_logging(config.verbosity, log_file="analysis.log")
    logger = get_logger(__name__)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import Verbosity

ROOT_LOGGER = "coverage_insight"

LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def setup_logging(
    verbosity: Verbosity = "normal", log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Install handlers on the ``coverage_insight`` logger.

    Calling this again replaces the handlers from the previous call, so a
    long-lived process (tests, the HTTP server) can switch verbosity.

    Args:
        verbosity: quiet (errors only), normal (warnings) or verbose (debug)
        log_file: Optional file that receives every record at DEBUG level

    Returns:
        The package root logger
    """
    level = LEVELS[verbosity]
    verbose = verbosity == "verbose"

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        # Messages contain Java generics and paths; never read them as markup
        markup=False,
        show_time=True,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    # Job and pool threads only matter when debugging interleaved jobs
    console_handler.setFormatter(
        logging.Formatter("[%(threadName)s] %(message)s" if verbose else "%(message)s")
    )

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``coverage_insight`` namespace (the root one for None)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
