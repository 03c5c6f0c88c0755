"""Coverage matching, granularity scoring and per-commit impact."""

from .commit_impact import CommitImpactAnalyzer
from .granularity import GranularityLevel, score_method, score_pair
from .matcher import CoverageMatcher, covers
from .models import CommitStatistics, CoverageReport, FileStatistics, MethodCoverage

__all__ = [
    "CoverageMatcher",
    "CommitImpactAnalyzer",
    "GranularityLevel",
    "score_pair",
    "score_method",
    "covers",
    "CoverageReport",
    "CommitStatistics",
    "FileStatistics",
    "MethodCoverage",
]
