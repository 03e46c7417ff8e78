"""Domain models for region decline indicators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union


class UnknownCategoryError(ValueError):
    """Raised when a category selector is outside the fixed set."""


class Category(str, Enum):
    DEMOGRAPHIC = "demographic"
    ECONOMIC = "economic"
    PHYSICAL_STOCK = "physical-stock"
    SUMMARY = "summary"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower().replace("_", "-")
        for category in cls:
            if category.value == text:
                return category
        allowed = [category.value for category in cls]
        raise UnknownCategoryError(f"Unknown category '{value}'. Allowed values: {allowed}.")

    @property
    def title(self) -> str:
        return _CATEGORY_TITLES[self]

    @property
    def artifact_basename(self) -> str:
        return _ARTIFACT_BASENAMES[self]

    @property
    def sheet_name(self) -> str:
        return _SHEET_NAMES[self]


ANALYZED_CATEGORIES: Tuple[Category, ...] = (
    Category.DEMOGRAPHIC,
    Category.ECONOMIC,
    Category.PHYSICAL_STOCK,
)

_CATEGORY_TITLES: Dict[Category, str] = {
    Category.DEMOGRAPHIC: "Population",
    Category.ECONOMIC: "Industry",
    Category.PHYSICAL_STOCK: "Environment",
    Category.SUMMARY: "Summary",
}
_ARTIFACT_BASENAMES: Dict[Category, str] = {
    Category.DEMOGRAPHIC: "Population_Decline_Analysis",
    Category.ECONOMIC: "Industry_Economy_Decline_Analysis",
    Category.PHYSICAL_STOCK: "Building_Age_Analysis",
    Category.SUMMARY: "Decline_Summary",
}
_SHEET_NAMES: Dict[Category, str] = {
    Category.DEMOGRAPHIC: "Population",
    Category.ECONOMIC: "Industry",
    Category.PHYSICAL_STOCK: "Environment",
    Category.SUMMARY: "Summary",
}


class Mark(str, Enum):
    """Boundary representation of a met/not-met flag."""

    MET = "O"
    NOT_MET = "X"

    @classmethod
    def of(cls, flag: bool) -> "Mark":
        return cls.MET if flag else cls.NOT_MET


@dataclass(frozen=True)
class RawRecord:
    year: str
    region_code: str
    metric_code: str
    value: str


@dataclass
class RegionSeries:
    """One pivoted region: raw values keyed by year."""

    region_code: str
    values: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TrendAssessment:
    """Decline verdict for one region of a time-series category."""

    region_code: str
    values: Mapping[str, str]
    peak_year: str | None
    peak_value: float | None
    latest_year: str | None
    latest_value: float | None
    decline_rate: float
    decline_years: frozenset[str]
    sharp_decline: bool
    sustained_decline: bool

    @property
    def met(self) -> bool:
        return self.sharp_decline or self.sustained_decline


@dataclass(frozen=True)
class BuildingStockAssessment:
    """Old-building share for one region at the reference year."""

    region_code: str
    total_count: float
    old_count: float
    old_ratio: float
    met: bool


RegionAssessment = Union[TrendAssessment, BuildingStockAssessment]


@dataclass(frozen=True)
class CategoryResult:
    category: Category
    years: Tuple[str, ...]
    rows: Tuple[RegionAssessment, ...]

    def row_by_region(self) -> Dict[str, RegionAssessment]:
        return {row.region_code: row for row in self.rows}


@dataclass(frozen=True)
class SummaryRow:
    region_code: str
    demographic_met: bool
    economic_met: bool
    physical_stock_met: bool
    criteria_met: int
    demographic_decline_rate: float = 0.0
    economic_decline_rate: float = 0.0
    old_building_ratio: float = 0.0

    def met_by_category(self) -> Dict[Category, bool]:
        return {
            Category.DEMOGRAPHIC: self.demographic_met,
            Category.ECONOMIC: self.economic_met,
            Category.PHYSICAL_STOCK: self.physical_stock_met,
        }
