"""Application layer package."""

from .analysis_service import NoInputError, run_category_analysis
from .export_service import ExportArtifact, export_category, export_summary
from .pipeline_service import IndicatorPipeline, PipelineResult, RunState

__all__ = [
    "NoInputError",
    "run_category_analysis",
    "ExportArtifact",
    "export_category",
    "export_summary",
    "IndicatorPipeline",
    "PipelineResult",
    "RunState",
]
