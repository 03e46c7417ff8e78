"""Environment-driven runtime settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from decline_indicators.config import get_pipeline_settings
from decline_indicators.infrastructure.upload_repository import (
    UploadValidationError,
    discover_uploads,
    load_uploads,
    select_uploads,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in (
        "DECLINE_MIN_CONSECUTIVE_DROPS",
        "DECLINE_INPUT_DIR",
        "DECLINE_OUTPUT_DIR",
        "DECLINE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_pipeline_settings.cache_clear()
    yield
    get_pipeline_settings.cache_clear()


class TestPipelineSettings:
    def test_defaults(self) -> None:
        settings = get_pipeline_settings()
        assert settings.min_consecutive_drops == 2
        assert settings.input_dir == Path("data/raw")
        assert settings.output_dir == Path("output")
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("DECLINE_MIN_CONSECUTIVE_DROPS", "3")
        monkeypatch.setenv("DECLINE_OUTPUT_DIR", "/tmp/reports")
        monkeypatch.setenv("DECLINE_LOG_LEVEL", "debug")
        settings = get_pipeline_settings()
        assert settings.min_consecutive_drops == 3
        assert settings.output_dir == Path("/tmp/reports")
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["zero", "0", "-1"])
    def test_invalid_drops_rejected(self, monkeypatch, raw) -> None:
        monkeypatch.setenv("DECLINE_MIN_CONSECUTIVE_DROPS", raw)
        with pytest.raises(ValueError):
            get_pipeline_settings()


class TestUploads:
    def test_duplicate_names_keep_last_content(self) -> None:
        pairs = select_uploads([("a.txt", "1"), ("b.txt", "2"), ("a.txt", "3")])
        assert pairs == [("a.txt", "3"), ("b.txt", "2")]

    def test_rejects_other_extensions(self) -> None:
        with pytest.raises(UploadValidationError):
            select_uploads([("a.csv", "1")])

    def test_rejects_too_many_files(self) -> None:
        with pytest.raises(UploadValidationError):
            select_uploads([(f"{idx}.txt", "") for idx in range(3)], max_files=2)

    def test_discover_and_load(self, tmp_path) -> None:
        (tmp_path / "b.txt").write_text("2020^A^m^1\n", encoding="utf-8")
        (tmp_path / "a.TXT").write_text("2020^A^m^2\n", encoding="utf-8")
        (tmp_path / "notes.md").write_text("skip", encoding="utf-8")
        paths = discover_uploads(tmp_path)
        assert [path.name for path in paths] == ["a.TXT", "b.txt"]
        pairs = load_uploads(paths)
        assert pairs[1] == ("b.txt", b"2020^A^m^1\n")

    def test_missing_directory(self, tmp_path) -> None:
        assert discover_uploads(tmp_path / "absent") == []
