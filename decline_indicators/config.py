"""Fixed decline criteria and env-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

RECORD_DELIMITER = "^"
RECORD_FIELDS: tuple[str, ...] = ("year", "region_code", "metric_code", "value")

POPULATION_METRIC_CODE = "to_in_001"
BUSINESS_METRIC_CODE = "to_fa_010"
BUILDING_AGE_PREFIX = "ho_yr_"
OLD_BUILDING_CODES: tuple[str, ...] = ("ho_yr_001", "ho_yr_002", "ho_yr_003", "ho_yr_004")
BUILDING_REFERENCE_YEAR = "2023"

POPULATION_DECLINE_THRESHOLD_PCT = -20.0
BUSINESS_DECLINE_THRESHOLD_PCT = -5.0
OLD_BUILDING_THRESHOLD_PCT = 50.0

BUSINESS_PEAK_WINDOW = 10
CONSECUTIVE_WINDOW = 5
DEFAULT_MIN_CONSECUTIVE_DROPS = 2

MAX_UPLOAD_FILES = 100
UPLOAD_EXTENSION = ".txt"


def _env_text(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _min_consecutive_drops() -> int:
    raw = _env_text("DECLINE_MIN_CONSECUTIVE_DROPS", str(DEFAULT_MIN_CONSECUTIVE_DROPS))
    try:
        drops = int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid DECLINE_MIN_CONSECUTIVE_DROPS: {raw}") from exc
    if drops < 1:
        raise ValueError(f"DECLINE_MIN_CONSECUTIVE_DROPS must be >= 1, got {drops}")
    return drops


@dataclass(frozen=True)
class PipelineSettings:
    """Runtime knobs; the decline criteria themselves stay fixed."""

    min_consecutive_drops: int = DEFAULT_MIN_CONSECUTIVE_DROPS
    input_dir: Path = Path("data/raw")
    output_dir: Path = Path("output")
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_pipeline_settings() -> PipelineSettings:
    return PipelineSettings(
        min_consecutive_drops=_min_consecutive_drops(),
        input_dir=Path(_env_text("DECLINE_INPUT_DIR", "data/raw")),
        output_dir=Path(_env_text("DECLINE_OUTPUT_DIR", "output")),
        log_level=_env_text("DECLINE_LOG_LEVEL", "INFO").upper(),
    )
