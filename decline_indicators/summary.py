"""Summary Engine: merges the three category verdicts into one ranked table."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from decline_indicators.domain.models import (
    ANALYZED_CATEGORIES,
    BuildingStockAssessment,
    Category,
    RegionAssessment,
    SummaryRow,
    TrendAssessment,
)
from decline_indicators.infrastructure.result_cache import ProcessedDataCache

DEFAULT_FILL_STYLE: Dict[str, object] = {"fill_color": "#cccccc", "fill_opacity": 0.5}
CRITERIA_FILL_STYLES: Dict[int, Dict[str, object]] = {
    3: {"fill_color": "#ef4444", "fill_opacity": 0.7},
    2: {"fill_color": "#f97316", "fill_opacity": 0.6},
    1: {"fill_color": "#facc15", "fill_opacity": 0.5},
}


class MissingPrerequisiteError(ValueError):
    """Raised when the summary is requested before every category has a result."""

    def __init__(self, missing: Sequence[Category]) -> None:
        self.missing: Tuple[Category, ...] = tuple(missing)
        names = ", ".join(category.value for category in self.missing)
        super().__init__(f"Missing prerequisite categories: {names}. Run them before the summary.")


class SummaryEngine:
    """Union of regions across categories, ranked by the number of criteria met."""

    @staticmethod
    def _trend_rate(row: RegionAssessment | None) -> float:
        if isinstance(row, TrendAssessment):
            return row.decline_rate
        return 0.0

    @staticmethod
    def _old_ratio(row: RegionAssessment | None) -> float:
        if isinstance(row, BuildingStockAssessment):
            return row.old_ratio
        return 0.0

    def _region_order(self, lookups: Dict[Category, Dict[str, RegionAssessment]]) -> List[str]:
        seen: Dict[str, None] = {}
        for category in ANALYZED_CATEGORIES:
            for region_code in lookups[category]:
                seen.setdefault(region_code, None)
        return list(seen)

    def run(self, cache: ProcessedDataCache) -> List[SummaryRow]:
        missing = cache.missing()
        if missing:
            raise MissingPrerequisiteError(missing)

        lookups: Dict[Category, Dict[str, RegionAssessment]] = {}
        for category in ANALYZED_CATEGORIES:
            result = cache.get(category)
            lookups[category] = result.row_by_region() if result is not None else {}

        rows: List[SummaryRow] = []
        for region_code in self._region_order(lookups):
            demographic = lookups[Category.DEMOGRAPHIC].get(region_code)
            economic = lookups[Category.ECONOMIC].get(region_code)
            physical = lookups[Category.PHYSICAL_STOCK].get(region_code)
            flags = [item is not None and item.met for item in (demographic, economic, physical)]
            rows.append(
                SummaryRow(
                    region_code=region_code,
                    demographic_met=flags[0],
                    economic_met=flags[1],
                    physical_stock_met=flags[2],
                    criteria_met=sum(1 for flag in flags if flag),
                    demographic_decline_rate=self._trend_rate(demographic),
                    economic_decline_rate=self._trend_rate(economic),
                    old_building_ratio=self._old_ratio(physical),
                )
            )

        # ties keep first-seen order
        return sorted(rows, key=lambda row: -row.criteria_met)


def region_criteria(rows: Sequence[SummaryRow]) -> Dict[str, int]:
    return {row.region_code: row.criteria_met for row in rows}


def criteria_fill_style(criteria_met: int) -> Dict[str, object]:
    """Map fill style for a region meeting the given number of criteria."""
    return dict(CRITERIA_FILL_STYLES.get(criteria_met, DEFAULT_FILL_STYLE))
