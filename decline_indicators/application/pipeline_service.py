"""Application service for running one category (or the summary) end to end.

`IndicatorPipeline.run()` is the only place faults are converted into a
failed `PipelineResult`; everything below it raises. A category's cache slot
is written only after its artifacts were produced, so a failed run leaves the
previous successful result in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence

from decline_indicators.application.analysis_service import NO_INPUT_MESSAGE, run_category_analysis
from decline_indicators.application.export_service import ExportArtifact, export_category, export_summary
from decline_indicators.application.reporting.rendering import PreviewTable
from decline_indicators.config import get_pipeline_settings
from decline_indicators.domain.models import Category, UnknownCategoryError
from decline_indicators.infrastructure.result_cache import ProcessedDataCache
from decline_indicators.ingestion import UploadedFile
from decline_indicators.summary import SummaryEngine, region_criteria

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES: Dict[Category, str] = {
    Category.DEMOGRAPHIC: "Population decline analysis completed",
    Category.ECONOMIC: "Industry-Economy decline analysis completed",
    Category.PHYSICAL_STOCK: "Building age analysis completed",
    Category.SUMMARY: "Decline summary completed",
}


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    success: bool
    message: str
    category: Category | None = None
    preview: PreviewTable | None = None
    text_artifact: bytes | None = None
    spreadsheet_artifact: bytes | None = None
    text_filename: str | None = None
    spreadsheet_filename: str | None = None
    region_criteria: Dict[str, int] | None = None

    @classmethod
    def failure(cls, message: str, category: Category | None = None) -> "PipelineResult":
        return cls(success=False, message=message, category=category)

    @classmethod
    def from_artifact(
        cls,
        category: Category,
        artifact: ExportArtifact,
        criteria: Dict[str, int] | None = None,
    ) -> "PipelineResult":
        return cls(
            success=True,
            message=SUCCESS_MESSAGES[category],
            category=category,
            preview=artifact.preview,
            text_artifact=artifact.delimited_text_bytes,
            spreadsheet_artifact=artifact.spreadsheet_bytes,
            text_filename=f"{category.artifact_basename}.csv",
            spreadsheet_filename=f"{category.artifact_basename}.xlsx",
            region_criteria=criteria,
        )


class IndicatorPipeline:
    """Per-category run state plus the shared result cache.

    Runs for different categories touch disjoint cache slots; callers keep at
    most one run in flight per category.
    """

    def __init__(
        self,
        cache: ProcessedDataCache | None = None,
        min_consecutive_drops: int | None = None,
    ) -> None:
        self.cache = cache if cache is not None else ProcessedDataCache()
        if min_consecutive_drops is None:
            min_consecutive_drops = get_pipeline_settings().min_consecutive_drops
        self.min_consecutive_drops = min_consecutive_drops
        self._states: Dict[Category, RunState] = {category: RunState.IDLE for category in Category}
        self._summary_engine = SummaryEngine()

    def state(self, category: Any) -> RunState:
        return self._states[Category.parse(category)]

    def reset(self, category: Any) -> None:
        selected = Category.parse(category)
        self._states[selected] = RunState.IDLE
        if selected != Category.SUMMARY:
            self.cache.clear(selected)
        logger.info("Category reset category=%s", selected.value)

    def _run_category(self, category: Category, files: Sequence[UploadedFile]) -> PipelineResult:
        result = run_category_analysis(category, files, min_consecutive_drops=self.min_consecutive_drops)
        artifact = export_category(result)
        self.cache.put(result)
        return PipelineResult.from_artifact(category, artifact)

    def _run_summary(self) -> PipelineResult:
        rows = self._summary_engine.run(self.cache)
        artifact = export_summary(rows, self.cache)
        logger.info(
            "Summary merged regions=%s all_three=%s",
            len(rows),
            sum(1 for row in rows if row.criteria_met == 3),
        )
        return PipelineResult.from_artifact(Category.SUMMARY, artifact, criteria=region_criteria(rows))

    def run(self, category: Any, files: Sequence[UploadedFile] = ()) -> PipelineResult:
        try:
            selected = Category.parse(category)
        except UnknownCategoryError as exc:
            logger.warning("Pipeline rejected selector=%r: %s", category, exc)
            return PipelineResult.failure(str(exc))

        if selected != Category.SUMMARY and not files:
            logger.warning("Pipeline run skipped category=%s: %s", selected.value, NO_INPUT_MESSAGE)
            return PipelineResult.failure(NO_INPUT_MESSAGE, category=selected)

        self._states[selected] = RunState.RUNNING
        logger.info("Pipeline run started category=%s files=%s", selected.value, len(files))
        try:
            if selected == Category.SUMMARY:
                outcome = self._run_summary()
            else:
                outcome = self._run_category(selected, files)
        except Exception as exc:  # noqa: BLE001
            self._states[selected] = RunState.FAILED
            logger.warning("Pipeline run failed category=%s: %s", selected.value, exc)
            message = str(exc) or exc.__class__.__name__
            return PipelineResult.failure(message, category=selected)

        self._states[selected] = RunState.SUCCESS
        return outcome
