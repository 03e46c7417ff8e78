"""Result tables: presentation headers, raw cell text and per-cell year markers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import polars as pl

from decline_indicators.application.reporting.metrics import (
    fmt_count,
    fmt_mark,
    fmt_pct,
    fmt_threshold_label,
)
from decline_indicators.config import BUSINESS_DECLINE_THRESHOLD_PCT, POPULATION_DECLINE_THRESHOLD_PCT
from decline_indicators.domain.models import (
    BuildingStockAssessment,
    Category,
    CategoryResult,
    SummaryRow,
    TrendAssessment,
)

REGION_LABEL = "Region Code"
PEAK_YEAR_LABEL = "Peak Year"
DECLINE_RATE_LABEL = "Decline Rate (%)"
CONSECUTIVE_LABEL = "Consecutive Decline"
CATEGORY_MET_LABEL = "Category Met"
TOTAL_BUILDINGS_LABEL = "Total Buildings"
OLD_BUILDINGS_LABEL = "Old Buildings"
OLD_RATIO_LABEL = "Old Building Ratio (%)"
CRITERIA_MET_LABEL = "Criteria Met"

PEAK_MARKER = "peak"
DECLINE_MARKER = "declining"

SHARP_DECLINE_LABELS: Dict[Category, str] = {
    Category.DEMOGRAPHIC: fmt_threshold_label(POPULATION_DECLINE_THRESHOLD_PCT),
    Category.ECONOMIC: fmt_threshold_label(BUSINESS_DECLINE_THRESHOLD_PCT),
}


@dataclass(frozen=True)
class ResultTable:
    """Flat string table shared by the text, workbook and preview outputs."""

    sheet_name: str
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, str], ...]
    markers: Tuple[Dict[str, str], ...] = ()

    def marker_for(self, row_index: int, header: str) -> str | None:
        if row_index >= len(self.markers):
            return None
        return self.markers[row_index].get(header)

    def to_frame(self) -> pl.DataFrame:
        schema = {header: pl.Utf8 for header in self.headers}
        if not self.rows:
            return pl.DataFrame(schema=schema)
        data = {header: [row.get(header, "") for row in self.rows] for header in self.headers}
        return pl.DataFrame(data, schema=schema)


def prefixed(category: Category, label: str) -> str:
    return f"{category.title}: {label}"


def _trend_headers(category: Category, years: Sequence[str]) -> List[str]:
    return [
        REGION_LABEL,
        *years,
        PEAK_YEAR_LABEL,
        DECLINE_RATE_LABEL,
        SHARP_DECLINE_LABELS[category],
        CONSECUTIVE_LABEL,
        CATEGORY_MET_LABEL,
    ]


def _trend_table(result: CategoryResult) -> ResultTable:
    category = result.category
    headers = _trend_headers(category, result.years)
    rows: List[Dict[str, str]] = []
    markers: List[Dict[str, str]] = []
    for item in result.rows:
        if not isinstance(item, TrendAssessment):
            continue
        row: Dict[str, str] = {REGION_LABEL: item.region_code}
        row_markers: Dict[str, str] = {}
        for year in result.years:
            row[year] = str(item.values.get(year, "") or "")
            if year == item.peak_year:
                row_markers[year] = PEAK_MARKER
            elif year in item.decline_years:
                row_markers[year] = DECLINE_MARKER
        row[PEAK_YEAR_LABEL] = item.peak_year or ""
        row[DECLINE_RATE_LABEL] = fmt_pct(item.decline_rate)
        row[SHARP_DECLINE_LABELS[category]] = fmt_mark(item.sharp_decline)
        row[CONSECUTIVE_LABEL] = fmt_mark(item.sustained_decline)
        row[CATEGORY_MET_LABEL] = fmt_mark(item.met)
        rows.append(row)
        markers.append(row_markers)
    return ResultTable(
        sheet_name=category.sheet_name,
        headers=tuple(headers),
        rows=tuple(rows),
        markers=tuple(markers),
    )


def _building_table(result: CategoryResult) -> ResultTable:
    headers = (
        REGION_LABEL,
        TOTAL_BUILDINGS_LABEL,
        OLD_BUILDINGS_LABEL,
        OLD_RATIO_LABEL,
        CATEGORY_MET_LABEL,
    )
    rows: List[Dict[str, str]] = []
    for item in result.rows:
        if not isinstance(item, BuildingStockAssessment):
            continue
        rows.append(
            {
                REGION_LABEL: item.region_code,
                TOTAL_BUILDINGS_LABEL: fmt_count(item.total_count),
                OLD_BUILDINGS_LABEL: fmt_count(item.old_count),
                OLD_RATIO_LABEL: fmt_pct(item.old_ratio),
                CATEGORY_MET_LABEL: fmt_mark(item.met),
            }
        )
    return ResultTable(sheet_name=result.category.sheet_name, headers=headers, rows=tuple(rows))


def category_table(result: CategoryResult) -> ResultTable:
    if result.category == Category.PHYSICAL_STOCK:
        return _building_table(result)
    return _trend_table(result)


def summary_headers() -> Tuple[str, ...]:
    return (
        REGION_LABEL,
        prefixed(Category.DEMOGRAPHIC, DECLINE_RATE_LABEL),
        prefixed(Category.DEMOGRAPHIC, CATEGORY_MET_LABEL),
        prefixed(Category.ECONOMIC, DECLINE_RATE_LABEL),
        prefixed(Category.ECONOMIC, CATEGORY_MET_LABEL),
        prefixed(Category.PHYSICAL_STOCK, OLD_RATIO_LABEL),
        prefixed(Category.PHYSICAL_STOCK, CATEGORY_MET_LABEL),
        CRITERIA_MET_LABEL,
    )


def summary_table(rows: Sequence[SummaryRow]) -> ResultTable:
    table_rows: List[Dict[str, str]] = []
    for row in rows:
        record: Dict[str, str] = {
            REGION_LABEL: row.region_code,
            prefixed(Category.DEMOGRAPHIC, DECLINE_RATE_LABEL): fmt_pct(row.demographic_decline_rate),
            prefixed(Category.ECONOMIC, DECLINE_RATE_LABEL): fmt_pct(row.economic_decline_rate),
            prefixed(Category.PHYSICAL_STOCK, OLD_RATIO_LABEL): fmt_pct(row.old_building_ratio),
            CRITERIA_MET_LABEL: str(row.criteria_met),
        }
        for category, met in row.met_by_category().items():
            record[prefixed(category, CATEGORY_MET_LABEL)] = fmt_mark(met)
        table_rows.append(record)
    return ResultTable(
        sheet_name=Category.SUMMARY.sheet_name,
        headers=summary_headers(),
        rows=tuple(table_rows),
    )
