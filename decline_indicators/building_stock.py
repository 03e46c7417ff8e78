"""Building Stock Engine: share of old buildings per region at the reference year."""

from __future__ import annotations

import logging
from typing import Any, Tuple

import polars as pl

from decline_indicators.config import (
    BUILDING_AGE_PREFIX,
    BUILDING_REFERENCE_YEAR,
    OLD_BUILDING_CODES,
    OLD_BUILDING_THRESHOLD_PCT,
)
from decline_indicators.domain.models import BuildingStockAssessment, Category, CategoryResult
from decline_indicators.ingestion import filter_metric_family, value_number_expr

logger = logging.getLogger(__name__)


class BuildingStockEngine:
    """Old-stock ratio over the construction-age buckets of one reference year."""

    CATEGORY: Category = Category.PHYSICAL_STOCK
    METRIC_PREFIX: str = BUILDING_AGE_PREFIX
    REFERENCE_YEAR: str = BUILDING_REFERENCE_YEAR
    OLD_CODES: Tuple[str, ...] = OLD_BUILDING_CODES
    THRESHOLD_PCT: float = OLD_BUILDING_THRESHOLD_PCT

    @staticmethod
    def _to_float(value: Any, default: float = 0.0) -> float:
        if value is None:
            return default
        return float(value)

    def _aggregate(self, df: pl.DataFrame) -> pl.DataFrame:
        indexed = df.with_row_index("__row")
        first_seen = indexed.group_by("region_code").agg(pl.col("__row").min().alias("__first_row"))
        # one value per (region, bucket); a later file overrides an earlier one
        latest = indexed.unique(subset=["region_code", "metric_code"], keep="last")
        totals = (
            latest.with_columns(value_number_expr().fill_null(0.0).alias("__count"))
            .group_by("region_code")
            .agg(
                [
                    pl.col("__count").sum().alias("total_count"),
                    pl.col("__count")
                    .filter(pl.col("metric_code").is_in(list(self.OLD_CODES)))
                    .sum()
                    .alias("old_count"),
                ]
            )
        )
        return (
            totals.join(first_seen, on="region_code", how="left")
            .sort("__first_row")
            .select(["region_code", "total_count", "old_count"])
        )

    def assess(self, region_code: str, total_count: float, old_count: float) -> BuildingStockAssessment:
        old_ratio = old_count / total_count * 100 if total_count > 0 else 0.0
        return BuildingStockAssessment(
            region_code=region_code,
            total_count=total_count,
            old_count=old_count,
            old_ratio=old_ratio,
            met=old_ratio >= self.THRESHOLD_PCT,
        )

    def run(self, df: pl.DataFrame) -> CategoryResult:
        filtered, meta = filter_metric_family(df, self.METRIC_PREFIX, self.REFERENCE_YEAR)
        logger.debug("Metric filter category=%s meta=%s", self.CATEGORY.value, meta)
        rows: list[BuildingStockAssessment] = []
        if not filtered.is_empty():
            for row in self._aggregate(filtered).iter_rows(named=True):
                rows.append(
                    self.assess(
                        str(row["region_code"]),
                        self._to_float(row.get("total_count")),
                        self._to_float(row.get("old_count")),
                    )
                )
        return CategoryResult(category=self.CATEGORY, years=(self.REFERENCE_YEAR,), rows=tuple(rows))

