"""
Coverage Insight - Heuristic Method-Level Test Coverage for Java Projects

Maps business methods to the test methods that exercise them by naming
convention, scores how thoroughly each method is tested, and attributes
coverage to individual commits using git history.

No bytecode instrumentation is involved: coverage here is a structural
judgment built from source, tests and diffs.
"""

__version__ = "0.1.0"
__author__ = "Naman Agarwal"

from .coverage.granularity import GranularityLevel, score_pair
from .coverage.matcher import CoverageMatcher
from .jobs.models import AnalysisRequest, AnalysisResult, JobStage
from .jobs.service import AnalysisService

__all__ = [
    "AnalysisService",  # Main entry point
    "AnalysisRequest",
    "AnalysisResult",
    "JobStage",
    "CoverageMatcher",
    "GranularityLevel",
    "score_pair",
]
