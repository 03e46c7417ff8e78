"""Parsing of ^-delimited indicator files and region/year pivoting."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Sequence, Tuple, Union

import polars as pl

from decline_indicators.config import RECORD_DELIMITER, RECORD_FIELDS
from decline_indicators.domain.models import RawRecord, RegionSeries

logger = logging.getLogger(__name__)

RECORD_SCHEMA: Dict[str, Any] = {name: pl.Utf8 for name in RECORD_FIELDS}
UploadedFile = Tuple[str, Union[str, bytes]]


def decode_content(content: str | bytes) -> str:
    if isinstance(content, (bytes, bytearray)):
        return bytes(content).decode("utf-8-sig", errors="replace")
    return content.lstrip("\ufeff")


def parse_records(content: str | bytes) -> List[RawRecord]:
    """Split one file into records; short lines are padded with empty fields."""
    text = decode_content(content)
    records: List[RawRecord] = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        parts = line.split(RECORD_DELIMITER)
        fields = [parts[idx] if idx < len(parts) else "" for idx in range(len(RECORD_FIELDS))]
        records.append(RawRecord(*fields))
    return records


def parse_value(value: Any) -> float | None:
    """Numeric reading of a raw cell; None for blank or non-numeric text."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def value_number_expr(column_name: str = "value") -> pl.Expr:
    """Numeric reading of a text column; blank, non-numeric and non-finite cells become null."""
    number = (
        pl.col(column_name)
        .cast(pl.Utf8, strict=False)
        .str.strip_chars()
        .str.replace_all(",", "")
        .cast(pl.Float64, strict=False)
        .fill_nan(None)
    )
    return pl.when(number.is_infinite()).then(None).otherwise(number).alias(column_name)


def records_frame(records: Sequence[RawRecord]) -> pl.DataFrame:
    if not records:
        return pl.DataFrame(schema=RECORD_SCHEMA)
    return pl.DataFrame(
        {name: [getattr(record, name) for record in records] for name in RECORD_FIELDS},
        schema=RECORD_SCHEMA,
    )


def load_records(files: Sequence[UploadedFile]) -> pl.DataFrame:
    """Parse files in the order supplied and stack their records."""
    frames: List[pl.DataFrame] = []
    for filename, content in files:
        records = parse_records(content)
        logger.debug("Parsed file=%s records=%s", filename, len(records))
        frames.append(records_frame(records))
    if not frames:
        return records_frame([])
    return pl.concat(frames, how="vertical")


def filter_metric(df: pl.DataFrame, metric_code: str) -> tuple[pl.DataFrame, Dict[str, Any]]:
    before_rows = int(df.height)
    filtered = df.filter(pl.col("metric_code") == pl.lit(metric_code))
    meta: Dict[str, Any] = {
        "metric_code": metric_code,
        "metric_rows_before": before_rows,
        "metric_rows_after": int(filtered.height),
    }
    return filtered, meta


def filter_metric_family(
    df: pl.DataFrame,
    prefix: str,
    year: str,
) -> tuple[pl.DataFrame, Dict[str, Any]]:
    before_rows = int(df.height)
    filtered = df.filter(
        (pl.col("year") == pl.lit(year)) & pl.col("metric_code").str.starts_with(prefix)
    )
    meta: Dict[str, Any] = {
        "metric_prefix": prefix,
        "reference_year": year,
        "metric_rows_before": before_rows,
        "metric_rows_after": int(filtered.height),
    }
    return filtered, meta


def pivot_by_region(df: pl.DataFrame) -> tuple[List[RegionSeries], List[str]]:
    """Group records by region in first-seen order; later (region, year) values overwrite earlier ones."""
    if df.is_empty():
        return [], []

    years = sorted(df.select(pl.col("year").unique()).to_series(0).to_list())
    grouped = df.group_by("region_code", maintain_order=True).agg(pl.col("year"), pl.col("value"))

    series: List[RegionSeries] = []
    for row in grouped.iter_rows(named=True):
        values: Dict[str, str] = {}
        for year, value in zip(row["year"], row["value"]):
            values[year] = value
        series.append(RegionSeries(region_code=row["region_code"], values=values))
    return series, years
