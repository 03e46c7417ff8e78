"""Trend Decline Engines: peak-to-latest decline and sustained decline per region."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import polars as pl

from decline_indicators.config import (
    BUSINESS_DECLINE_THRESHOLD_PCT,
    BUSINESS_METRIC_CODE,
    BUSINESS_PEAK_WINDOW,
    CONSECUTIVE_WINDOW,
    DEFAULT_MIN_CONSECUTIVE_DROPS,
    POPULATION_DECLINE_THRESHOLD_PCT,
    POPULATION_METRIC_CODE,
)
from decline_indicators.domain.models import Category, CategoryResult, RegionSeries, TrendAssessment
from decline_indicators.ingestion import filter_metric, parse_value, pivot_by_region

logger = logging.getLogger(__name__)

Point = Tuple[str, float]


class TrendDeclineEngine:
    """Shared decline rules for time-series categories.

    Subclasses fix the metric code, the sharp-decline threshold, the peak
    window (None means the full year range) and whether a peak in the latest
    year neutralises the decline rate.
    """

    CATEGORY: Category = Category.DEMOGRAPHIC
    METRIC_CODE: str = POPULATION_METRIC_CODE
    THRESHOLD_PCT: float = POPULATION_DECLINE_THRESHOLD_PCT
    PEAK_WINDOW: int | None = None
    REQUIRE_DISTINCT_PEAK: bool = False

    def __init__(
        self,
        min_consecutive_drops: int = DEFAULT_MIN_CONSECUTIVE_DROPS,
        consecutive_window: int = CONSECUTIVE_WINDOW,
    ) -> None:
        if min_consecutive_drops < 1:
            raise ValueError(f"min_consecutive_drops must be >= 1, got {min_consecutive_drops}")
        if consecutive_window < 2:
            raise ValueError(f"consecutive_window must be >= 2, got {consecutive_window}")
        self.min_consecutive_drops = min_consecutive_drops
        self.consecutive_window = consecutive_window

    @staticmethod
    def _numeric_points(series: RegionSeries, years: Sequence[str]) -> List[Point]:
        points: List[Point] = []
        for year in years:
            value = parse_value(series.values.get(year))
            if value is not None:
                points.append((year, value))
        return points

    def _peak(self, points: Sequence[Point]) -> tuple[str | None, float | None]:
        window = points[-self.PEAK_WINDOW:] if self.PEAK_WINDOW else points
        peak_year: str | None = None
        peak_value: float | None = None
        for year, value in window:
            if value <= 0:
                continue
            if peak_value is None or value > peak_value:
                peak_year, peak_value = year, value
        return peak_year, peak_value

    def _decline_rate(
        self,
        peak_year: str | None,
        peak_value: float | None,
        latest_year: str | None,
        latest_value: float | None,
    ) -> float:
        if peak_value is None or latest_value is None:
            return 0.0
        if peak_value <= 0 or latest_value <= 0:
            return 0.0
        if self.REQUIRE_DISTINCT_PEAK and peak_year == latest_year:
            return 0.0
        return (latest_value - peak_value) / peak_value * 100

    def _decline_run(self, points: Sequence[Point]) -> tuple[int, frozenset[str]]:
        recent = list(points[-self.consecutive_window:])
        run = 0
        longest = 0
        declining: set[str] = set()
        for (_, prev_value), (year, value) in zip(recent, recent[1:]):
            if value < prev_value:
                run += 1
                declining.add(year)
                longest = max(longest, run)
            else:
                run = 0
        return longest, frozenset(declining)

    def assess(self, series: RegionSeries, years: Sequence[str]) -> TrendAssessment:
        points = self._numeric_points(series, years)
        peak_year, peak_value = self._peak(points)
        latest_year, latest_value = points[-1] if points else (None, None)
        decline_rate = self._decline_rate(peak_year, peak_value, latest_year, latest_value)
        longest_run, decline_years = self._decline_run(points)

        return TrendAssessment(
            region_code=series.region_code,
            values=dict(series.values),
            peak_year=peak_year,
            peak_value=peak_value,
            latest_year=latest_year,
            latest_value=latest_value,
            decline_rate=decline_rate,
            decline_years=decline_years,
            sharp_decline=decline_rate <= self.THRESHOLD_PCT,
            sustained_decline=longest_run >= self.min_consecutive_drops,
        )

    def run(self, df: pl.DataFrame) -> CategoryResult:
        filtered, meta = filter_metric(df, self.METRIC_CODE)
        logger.debug("Metric filter category=%s meta=%s", self.CATEGORY.value, meta)
        series, years = pivot_by_region(filtered)
        rows = tuple(self.assess(item, years) for item in series)
        return CategoryResult(category=self.CATEGORY, years=tuple(years), rows=rows)


class PopulationDeclineEngine(TrendDeclineEngine):
    """Population: peak over the full range, sharp decline at -20%."""


class IndustryDeclineEngine(TrendDeclineEngine):
    """Business count: peak over the last 10 years with data, sharp decline at -5%."""

    CATEGORY = Category.ECONOMIC
    METRIC_CODE = BUSINESS_METRIC_CODE
    THRESHOLD_PCT = BUSINESS_DECLINE_THRESHOLD_PCT
    PEAK_WINDOW = BUSINESS_PEAK_WINDOW
    REQUIRE_DISTINCT_PEAK = True
