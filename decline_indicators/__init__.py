"""Region decline indicator package."""

from .application import IndicatorPipeline, PipelineResult, RunState, run_category_analysis
from .building_stock import BuildingStockEngine
from .infrastructure import ProcessedDataCache
from .ingestion import parse_records, pivot_by_region
from .summary import MissingPrerequisiteError, SummaryEngine, criteria_fill_style, region_criteria
from .trend import IndustryDeclineEngine, PopulationDeclineEngine

__all__ = [
    "IndicatorPipeline",
    "PipelineResult",
    "RunState",
    "run_category_analysis",
    "BuildingStockEngine",
    "ProcessedDataCache",
    "parse_records",
    "pivot_by_region",
    "MissingPrerequisiteError",
    "SummaryEngine",
    "criteria_fill_style",
    "region_criteria",
    "IndustryDeclineEngine",
    "PopulationDeclineEngine",
]
