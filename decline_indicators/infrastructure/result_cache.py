"""In-memory store of the latest successful result per analyzed category."""

from __future__ import annotations

from typing import Dict, Tuple

from decline_indicators.domain.models import ANALYZED_CATEGORIES, Category, CategoryResult


class ProcessedDataCache:
    """Three named slots, one per analyzed category.

    A slot is only replaced by a complete result; failed runs never touch it.
    """

    def __init__(self) -> None:
        self._slots: Dict[Category, CategoryResult] = {}

    def put(self, result: CategoryResult) -> None:
        if result.category not in ANALYZED_CATEGORIES:
            raise ValueError(f"Category '{result.category.value}' has no cache slot.")
        self._slots[result.category] = result

    def get(self, category: Category) -> CategoryResult | None:
        return self._slots.get(category)

    def missing(self) -> Tuple[Category, ...]:
        return tuple(category for category in ANALYZED_CATEGORIES if category not in self._slots)

    def clear(self, category: Category | None = None) -> None:
        if category is None:
            self._slots.clear()
            return
        self._slots.pop(category, None)
