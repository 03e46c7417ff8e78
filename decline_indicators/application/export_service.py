"""Application service for rendering result tables into preview and artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import polars as pl

from decline_indicators.application.reporting.rendering import PreviewTable, render_preview
from decline_indicators.application.reporting.tables import (
    REGION_LABEL,
    ResultTable,
    category_table,
    summary_table,
)
from decline_indicators.domain.models import ANALYZED_CATEGORIES, CategoryResult, SummaryRow
from decline_indicators.infrastructure.report_exporter import encode_delimited_text, encode_workbook
from decline_indicators.infrastructure.result_cache import ProcessedDataCache


@dataclass(frozen=True)
class ExportArtifact:
    delimited_text_bytes: bytes
    spreadsheet_bytes: bytes
    preview: PreviewTable


def _artifact(table: ResultTable, sheets: Dict[str, pl.DataFrame]) -> ExportArtifact:
    return ExportArtifact(
        delimited_text_bytes=encode_delimited_text(table.headers, table.rows),
        spreadsheet_bytes=encode_workbook(sheets, text_columns=(REGION_LABEL,)),
        preview=render_preview(table),
    )


def export_category(result: CategoryResult) -> ExportArtifact:
    table = category_table(result)
    return _artifact(table, {table.sheet_name: table.to_frame()})


def export_summary(rows: Sequence[SummaryRow], cache: ProcessedDataCache) -> ExportArtifact:
    """Summary sheet first, then each category's full table taken from the cache."""
    table = summary_table(rows)
    sheets: Dict[str, pl.DataFrame] = {table.sheet_name: table.to_frame()}
    for category in ANALYZED_CATEGORIES:
        result = cache.get(category)
        if result is None:
            continue
        category_sheet = category_table(result)
        sheets[category_sheet.sheet_name] = category_sheet.to_frame()
    return _artifact(table, sheets)
