"""Configuration loading and management for Coverage Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.coverage-insight.toml)
    3. Project config (./coverage-insight.toml)
    4. Explicit config file
    5. Environment variables (COVERAGE_INSIGHT_* prefix)
    6. Keyword overrides (CLI flags, tests)

Example:
    >>> config = load_config(git_max_commits=50)
    >>> config.git_max_commits
    50
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import CoverageInsightError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "COVERAGE_INSIGHT_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis execution.

    Attributes:
        Source discovery:
            source_extension: Suffix of parseable source files
            skip_dirs: Directory names never descended into (hidden
                directories are always skipped)

        Git integration:
            git_max_commits: Newest-first commit bound for history extraction
            git_timeout_seconds: Timeout for a single git subprocess call

        Performance:
            max_workers: Thread pool size within a job (None = auto, capped at 8)
            job_timeout_seconds: Stage-boundary time budget per job (None = unbounded)

        Reports:
            report_dir: Directory holding saved reports and history.db

        Output control:
            verbosity: Logging verbosity level
    """

    source_extension: str = ".java"
    skip_dirs: list[str] = field(
        default_factory=lambda: ["target", "build", "out", "node_modules"]
    )

    git_max_commits: int = 100
    git_timeout_seconds: int = 30

    max_workers: Optional[int] = None
    job_timeout_seconds: Optional[float] = None

    report_dir: str = str(Path.home() / "java-coverage-reports")

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.source_extension.startswith("."):
            raise InvalidConfigError(
                "source_extension", self.source_extension, "must start with '.'"
            )
        if self.git_max_commits < 1:
            raise InvalidConfigError("git_max_commits", self.git_max_commits, "must be at least 1")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidConfigError("max_workers", self.max_workers, "must be at least 1")
        if self.job_timeout_seconds is not None and self.job_timeout_seconds <= 0:
            raise InvalidConfigError(
                "job_timeout_seconds", self.job_timeout_seconds, "must be positive"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    @property
    def workers(self) -> int:
        """Resolved worker count for intra-job parallelism."""
        if self.max_workers is not None:
            return self.max_workers
        return min(os.cpu_count() or 4, 8)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        CoverageInsightError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".coverage-insight.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "coverage-insight.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise CoverageInsightError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise CoverageInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COVERAGE_INSIGHT_* environment variables.

    List-valued fields (skip_dirs) accept a comma-separated string.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise CoverageInsightError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none = [t for t in args if t is not type(None)]
        if non_none:
            type_hint = non_none[0]

    origin = getattr(type_hint, "__origin__", None)

    if origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file; the ``[coverage_insight]`` table wins when present."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise CoverageInsightError(f"Invalid config file '{path}': {e}")
    section = data.get("coverage_insight")
    if isinstance(section, dict):
        return section
    return data
