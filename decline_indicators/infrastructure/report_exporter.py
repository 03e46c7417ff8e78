"""Infrastructure adapter for downloadable artifacts (BOM-prefixed CSV and xlsx)."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Collection, Dict, Sequence

import polars as pl

from decline_indicators.ingestion import parse_value

UTF8_BOM = b"\xef\xbb\xbf"
TEXT_DELIMITER = ","
MAX_SHEET_TITLE = 31


def _import_openpyxl() -> Any:
    try:
        from openpyxl import Workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required for workbook export.") from exc
    return Workbook


def encode_delimited_text(headers: Sequence[str], rows: Sequence[Dict[str, str]]) -> bytes:
    """Comma-joined lines with no quoting, UTF-8 with a leading BOM."""
    lines = [TEXT_DELIMITER.join(headers)]
    for row in rows:
        lines.append(TEXT_DELIMITER.join(str(row.get(header, "") or "") for header in headers))
    return UTF8_BOM + "\n".join(lines).encode("utf-8")


def _excel_cell_value(value: Any) -> Any:
    if value is None:
        return None
    text = str(value)
    number = parse_value(text)
    if number is None:
        return text
    stripped = text.strip().replace(",", "")
    if number.is_integer() and "." not in stripped and "e" not in stripped.lower():
        return int(number)
    return number


def encode_workbook(
    sheets: Dict[str, pl.DataFrame],
    text_columns: Collection[str] = (),
) -> bytes:
    """One worksheet per frame; numeric-looking cells become numbers."""
    Workbook = _import_openpyxl()
    workbook = Workbook()
    default_sheet = workbook.active
    workbook.remove(default_sheet)

    for sheet_name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=str(sheet_name)[:MAX_SHEET_TITLE])
        worksheet.append(frame.columns)
        keep_text = [column in text_columns for column in frame.columns]
        for row in frame.iter_rows(named=False):
            worksheet.append(
                [
                    (None if value is None else str(value)) if as_text else _excel_cell_value(value)
                    for value, as_text in zip(row, keep_text)
                ]
            )

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def save_artifact(path: Path, payload: bytes) -> tuple[bool, str]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except PermissionError as exc:
        return False, str(exc)
    return True, ""
