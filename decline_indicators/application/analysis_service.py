"""Application service for the per-category decline analysis use case."""

from __future__ import annotations

import logging
from typing import Sequence, Union

from decline_indicators.building_stock import BuildingStockEngine
from decline_indicators.config import DEFAULT_MIN_CONSECUTIVE_DROPS
from decline_indicators.domain.models import Category, CategoryResult
from decline_indicators.ingestion import UploadedFile, load_records
from decline_indicators.trend import IndustryDeclineEngine, PopulationDeclineEngine

logger = logging.getLogger(__name__)

CategoryEngine = Union[PopulationDeclineEngine, IndustryDeclineEngine, BuildingStockEngine]
NO_INPUT_MESSAGE = "No files provided"


class NoInputError(ValueError):
    """Raised when a category run is requested without any file."""


def build_engine(category: Category, min_consecutive_drops: int = DEFAULT_MIN_CONSECUTIVE_DROPS) -> CategoryEngine:
    if category == Category.DEMOGRAPHIC:
        return PopulationDeclineEngine(min_consecutive_drops=min_consecutive_drops)
    if category == Category.ECONOMIC:
        return IndustryDeclineEngine(min_consecutive_drops=min_consecutive_drops)
    if category == Category.PHYSICAL_STOCK:
        return BuildingStockEngine()
    raise ValueError(f"Category '{category.value}' is not analyzed from raw files.")


def run_category_analysis(
    category: Category,
    files: Sequence[UploadedFile],
    min_consecutive_drops: int = DEFAULT_MIN_CONSECUTIVE_DROPS,
) -> CategoryResult:
    """Parse the files in order, then run the category's engine over the stacked records."""
    if not files:
        raise NoInputError(NO_INPUT_MESSAGE)
    engine = build_engine(category, min_consecutive_drops=min_consecutive_drops)
    df = load_records(files)
    logger.debug("Loaded records category=%s files=%s rows=%s", category.value, len(files), df.height)
    result = engine.run(df)
    met_count = sum(1 for row in result.rows if row.met)
    logger.info(
        "Category analysis finished category=%s regions=%s met=%s years=%s",
        category.value,
        len(result.rows),
        met_count,
        len(result.years),
    )
    return result
