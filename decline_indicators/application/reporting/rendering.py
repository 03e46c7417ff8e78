"""Preview rendering helpers (display-only year markers)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from decline_indicators.application.reporting.tables import DECLINE_MARKER, PEAK_MARKER, ResultTable

MARKER_SYMBOLS: Dict[str, str] = {
    PEAK_MARKER: "▲",
    DECLINE_MARKER: "▼",
}


@dataclass(frozen=True)
class PreviewTable:
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, str], ...]


def marked_value(value: str, marker: str | None) -> str:
    symbol = MARKER_SYMBOLS.get(marker or "")
    if not symbol:
        return value
    return f"{value} {symbol}"


def render_preview(table: ResultTable) -> PreviewTable:
    rows: List[Dict[str, str]] = []
    for idx, row in enumerate(table.rows):
        rendered: Dict[str, str] = {}
        for header in table.headers:
            rendered[header] = marked_value(row.get(header, ""), table.marker_for(idx, header))
        rows.append(rendered)
    return PreviewTable(headers=table.headers, rows=tuple(rows))
