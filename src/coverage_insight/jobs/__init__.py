"""Analysis jobs: pipeline, registry and the service facade."""

from .models import AnalysisRequest, AnalysisResult, JobStage, ProgressRecord, ProjectInfo
from .pipeline import AnalysisPipeline
from .registry import JobRegistry
from .service import AnalysisService

__all__ = [
    "AnalysisService",
    "AnalysisPipeline",
    "JobRegistry",
    "AnalysisRequest",
    "AnalysisResult",
    "JobStage",
    "ProgressRecord",
    "ProjectInfo",
]
