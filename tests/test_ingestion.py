"""Record parsing and region/year pivoting."""

from __future__ import annotations

import pytest

from decline_indicators.domain.models import RawRecord
from decline_indicators.ingestion import (
    filter_metric,
    filter_metric_family,
    load_records,
    parse_records,
    parse_value,
    pivot_by_region,
)


class TestParseRecords:
    def test_splits_on_caret(self) -> None:
        records = parse_records("2020^11010^to_in_001^1500\n")
        assert records == [RawRecord("2020", "11010", "to_in_001", "1500")]

    def test_skips_blank_lines(self) -> None:
        content = "2020^A^m^1\n\n   \n2021^A^m^2\n"
        assert [record.year for record in parse_records(content)] == ["2020", "2021"]

    def test_short_line_is_padded(self) -> None:
        records = parse_records("2020^A")
        assert records == [RawRecord("2020", "A", "", "")]

    def test_extra_fields_are_ignored(self) -> None:
        records = parse_records("2020^A^m^5^extra")
        assert records[0].value == "5"

    def test_crlf_and_bom_bytes(self) -> None:
        content = "\ufeff2020^A^m^5\r\n2021^A^m^4\r\n".encode("utf-8")
        records = parse_records(content)
        assert [(r.year, r.value) for r in records] == [("2020", "5"), ("2021", "4")]

    def test_undecodable_bytes_do_not_raise(self) -> None:
        records = parse_records(b"2020^A^m^\xff\n")
        assert len(records) == 1
        assert records[0].year == "2020"


class TestParseValue:
    @pytest.mark.parametrize(
        "raw, expected",
        [("100", 100.0), (" 1,234.5 ", 1234.5), ("-3", -3.0), (7, 7.0)],
    )
    def test_numeric(self, raw, expected) -> None:
        assert parse_value(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "  ", "n/a", "nan", "inf"])
    def test_non_numeric_is_none(self, raw) -> None:
        assert parse_value(raw) is None


class TestPivot:
    def test_later_file_overwrites_same_region_year(self) -> None:
        df = load_records(
            [
                ("a.txt", "2020^R1^m^10\n2021^R1^m^11\n"),
                ("b.txt", "2020^R1^m^99\n"),
            ]
        )
        series, years = pivot_by_region(df)
        assert years == ["2020", "2021"]
        assert series[0].values == {"2020": "99", "2021": "11"}

    def test_years_sorted_and_regions_first_seen(self) -> None:
        df = load_records([("a.txt", "2022^R2^m^1\n2019^R1^m^2\n2020^R2^m^3\n")])
        series, years = pivot_by_region(df)
        assert years == ["2019", "2020", "2022"]
        assert [item.region_code for item in series] == ["R2", "R1"]
        assert "2019" not in series[0].values

    def test_empty_frame(self) -> None:
        series, years = pivot_by_region(load_records([]))
        assert series == []
        assert years == []


class TestFilters:
    def test_filter_metric_reports_counts(self) -> None:
        df = load_records([("a.txt", "2020^R1^keep^1\n2020^R1^drop^2\n")])
        filtered, meta = filter_metric(df, "keep")
        assert filtered.height == 1
        assert meta["metric_rows_before"] == 2
        assert meta["metric_rows_after"] == 1

    def test_filter_family_checks_year_and_prefix(self) -> None:
        df = load_records(
            [("a.txt", "2023^R1^ho_yr_001^1\n2022^R1^ho_yr_001^2\n2023^R1^to_in_001^3\n")]
        )
        filtered, _ = filter_metric_family(df, "ho_yr_", "2023")
        assert filtered["value"].to_list() == ["1"]
