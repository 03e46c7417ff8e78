from __future__ import annotations

from typing import Iterable, Tuple

import pytest

from decline_indicators.config import BUSINESS_METRIC_CODE, POPULATION_METRIC_CODE
from decline_indicators.infrastructure.result_cache import ProcessedDataCache


def indicator_file(
    name: str,
    rows: Iterable[Tuple[str, str, str, object]],
) -> Tuple[str, str]:
    """Build one uploaded file from (year, region, metric, value) tuples."""
    lines = ["^".join([year, region, metric, str(value)]) for year, region, metric, value in rows]
    return name, "\n".join(lines) + "\n"


def population_rows(region: str, values: dict) -> list:
    return [(year, region, POPULATION_METRIC_CODE, value) for year, value in values.items()]


def business_rows(region: str, values: dict) -> list:
    return [(year, region, BUSINESS_METRIC_CODE, value) for year, value in values.items()]


def building_rows(region: str, buckets: dict, year: str = "2023") -> list:
    return [(year, region, code, value) for code, value in buckets.items()]


@pytest.fixture()
def cache() -> ProcessedDataCache:
    return ProcessedDataCache()
