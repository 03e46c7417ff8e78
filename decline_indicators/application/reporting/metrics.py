"""Shared formatting utilities for reporting."""

from __future__ import annotations

from decline_indicators.domain.models import Mark


def fmt_pct(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def fmt_count(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:.2f}"


def fmt_mark(flag: bool) -> str:
    return Mark.of(flag).value


def fmt_threshold_label(threshold_pct: float) -> str:
    return f"Decline ≥{abs(threshold_pct):g}%"
