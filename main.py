"""Region decline indicator entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter
from typing import List

from decline_indicators.application.pipeline_service import IndicatorPipeline, PipelineResult
from decline_indicators.config import get_pipeline_settings
from decline_indicators.domain.models import ANALYZED_CATEGORIES, Category
from decline_indicators.infrastructure.report_exporter import save_artifact
from decline_indicators.infrastructure.upload_repository import (
    UploadValidationError,
    discover_uploads,
    load_uploads,
)
from decline_indicators.ingestion import UploadedFile

logger = logging.getLogger(__name__)


def _save_outputs(output_dir: Path, result: PipelineResult) -> List[str]:
    saved: List[str] = []
    outputs = [
        (result.text_filename, result.text_artifact),
        (result.spreadsheet_filename, result.spreadsheet_artifact),
    ]
    for filename, payload in outputs:
        if not filename or payload is None:
            continue
        path = output_dir / filename
        ok, error_message = save_artifact(path, payload)
        if ok:
            saved.append(str(path))
        else:
            print(f"Save skipped (file may be open/locked): {path} {error_message}")
    return saved


def _load_and_run(pipeline: IndicatorPipeline, category: Category, input_dir: Path) -> PipelineResult:
    files: List[UploadedFile] = []
    if category != Category.SUMMARY:
        try:
            files = load_uploads(discover_uploads(input_dir / category.value))
        except (UploadValidationError, OSError) as exc:
            logger.warning("Upload rejected category=%s: %s", category.value, exc)
            return PipelineResult.failure(str(exc) or exc.__class__.__name__, category=category)
    return pipeline.run(category, files)


def main() -> None:
    settings = get_pipeline_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pipeline_start = perf_counter()
    stage_timings: list[tuple[str, float]] = []
    pipeline = IndicatorPipeline(min_consecutive_drops=settings.min_consecutive_drops)
    saved_paths: List[str] = []

    for category in [*ANALYZED_CATEGORIES, Category.SUMMARY]:
        stage_start = perf_counter()
        result = _load_and_run(pipeline, category, settings.input_dir)
        stage_timings.append((category.value, perf_counter() - stage_start))
        if not result.success:
            print(f"[{category.value}] failed: {result.message}")
            continue

        row_count = len(result.preview.rows) if result.preview is not None else 0
        print(f"[{category.value}] {result.message}: regions={row_count}")
        saved_paths.extend(_save_outputs(settings.output_dir, result))
        if result.region_criteria:
            met_any = sum(1 for count in result.region_criteria.values() if count > 0)
            print(f"Regions meeting at least one criterion: {met_any}/{len(result.region_criteria)}")

    total_elapsed = perf_counter() - pipeline_start
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {total_elapsed:.3f}s")
    for path in saved_paths:
        print(f"Saved: {path}")


if __name__ == "__main__":
    main()
