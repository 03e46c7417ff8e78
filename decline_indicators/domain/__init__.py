"""Domain layer package."""

from .models import (
    ANALYZED_CATEGORIES,
    BuildingStockAssessment,
    Category,
    CategoryResult,
    Mark,
    RawRecord,
    RegionSeries,
    SummaryRow,
    TrendAssessment,
    UnknownCategoryError,
)

__all__ = [
    "ANALYZED_CATEGORIES",
    "BuildingStockAssessment",
    "Category",
    "CategoryResult",
    "Mark",
    "RawRecord",
    "RegionSeries",
    "SummaryRow",
    "TrendAssessment",
    "UnknownCategoryError",
]
