"""Population and industry decline engines."""

from __future__ import annotations

import pytest

from conftest import business_rows, indicator_file, population_rows
from decline_indicators.domain.models import Category, RegionSeries
from decline_indicators.ingestion import load_records
from decline_indicators.trend import IndustryDeclineEngine, PopulationDeclineEngine


def assess(engine, values: dict):
    years = sorted(values)
    series = RegionSeries(region_code="A", values={year: str(value) for year, value in values.items()})
    return engine.assess(series, years)


@pytest.fixture()
def population() -> PopulationDeclineEngine:
    return PopulationDeclineEngine()


@pytest.fixture()
def industry() -> IndustryDeclineEngine:
    return IndustryDeclineEngine()


class TestPopulationDecline:
    def test_peak_to_latest_decline(self, population) -> None:
        row = assess(population, {"2000": 100, "2010": 70, "2015": 60})
        assert row.peak_year == "2000"
        assert row.peak_value == pytest.approx(100.0)
        assert row.latest_year == "2015"
        assert row.decline_rate == pytest.approx(-40.0)
        assert row.sharp_decline is True
        assert row.met is True

    def test_single_value_has_zero_rate(self, population) -> None:
        row = assess(population, {"2020": 42})
        assert row.peak_year == "2020"
        assert row.decline_rate == 0.0
        assert row.met is False

    def test_first_year_wins_peak_tie(self, population) -> None:
        row = assess(population, {"2019": 50, "2020": 50, "2021": 45})
        assert row.peak_year == "2019"

    def test_non_positive_latest_gives_zero_rate(self, population) -> None:
        row = assess(population, {"2019": 100, "2020": 0})
        assert row.decline_rate == 0.0
        assert row.sharp_decline is False

    def test_no_positive_value_has_no_peak(self, population) -> None:
        row = assess(population, {"2019": 0, "2020": -5})
        assert row.peak_year is None
        assert row.decline_rate == 0.0

    def test_threshold_is_inclusive(self, population) -> None:
        row = assess(population, {"2019": 100, "2020": 80})
        assert row.decline_rate == pytest.approx(-20.0)
        assert row.sharp_decline is True

    def test_blank_and_text_values_are_skipped(self, population) -> None:
        row = assess(population, {"2019": 10, "2020": "", "2021": "n/a", "2022": 9, "2023": 8})
        assert row.sustained_decline is True
        assert row.decline_years == frozenset({"2022", "2023"})


class TestSustainedDecline:
    def test_one_drop_is_not_enough(self, population) -> None:
        row = assess(population, {"2019": 10, "2020": 9})
        assert row.sustained_decline is False
        assert row.decline_years == frozenset({"2020"})
        assert row.met is False

    def test_two_drops_meet_the_criterion(self, population) -> None:
        row = assess(population, {"2019": 100, "2020": 99, "2021": 98})
        assert row.sharp_decline is False
        assert row.sustained_decline is True
        assert row.met is True

    def test_drops_must_be_adjacent(self, population) -> None:
        row = assess(population, {"2019": 10, "2020": 9, "2021": 10, "2022": 9, "2023": 10})
        assert row.sustained_decline is False
        assert row.decline_years == frozenset({"2020", "2022"})

    def test_only_last_five_points_count(self, population) -> None:
        values = {"2015": 100, "2016": 90, "2017": 80, "2018": 85, "2019": 86, "2020": 87, "2021": 88}
        row = assess(population, values)
        assert row.sustained_decline is False
        assert row.decline_years == frozenset()
        assert row.decline_rate == pytest.approx(-12.0)

    def test_equal_values_break_the_run(self, population) -> None:
        row = assess(population, {"2019": 10, "2020": 9, "2021": 9, "2022": 8})
        assert row.sustained_decline is False

    def test_threshold_is_configurable(self) -> None:
        engine = PopulationDeclineEngine(min_consecutive_drops=3)
        assert assess(engine, {"2019": 100, "2020": 99, "2021": 98}).sustained_decline is False
        assert assess(engine, {"2019": 100, "2020": 99, "2021": 98, "2022": 97}).sustained_decline is True

    def test_invalid_threshold_rejected(self) -> None:
        with pytest.raises(ValueError):
            PopulationDeclineEngine(min_consecutive_drops=0)


class TestIndustryDecline:
    def test_peak_in_latest_year_forces_zero_rate(self, industry) -> None:
        row = assess(industry, {"2020": 50, "2021": 60})
        assert row.peak_year == "2021"
        assert row.decline_rate == 0.0
        assert row.sharp_decline is False

    def test_peak_searched_in_last_ten_years(self, industry) -> None:
        values = {"2010": 1000, "2011": 100, "2012": 200}
        values.update({str(year): 190 for year in range(2013, 2022)})
        row = assess(industry, values)
        assert row.peak_year == "2012"
        assert row.decline_rate == pytest.approx(-5.0)
        assert row.sharp_decline is True

    def test_small_decline_below_threshold(self, industry) -> None:
        row = assess(industry, {"2020": 100, "2021": 96})
        assert row.decline_rate == pytest.approx(-4.0)
        assert row.sharp_decline is False

    def test_two_drops_meet_without_sharp_decline(self, industry) -> None:
        row = assess(industry, {"2019": 100, "2020": 99, "2021": 98})
        assert row.peak_year == "2019"
        assert row.decline_rate == pytest.approx(-2.0)
        assert row.sharp_decline is False
        assert row.sustained_decline is True
        assert row.decline_years == frozenset({"2020", "2021"})
        assert row.met is True

    def test_one_drop_small_decline_is_not_met(self, industry) -> None:
        row = assess(industry, {"2020": 100, "2021": 100, "2022": 98})
        assert row.sustained_decline is False
        assert row.met is False


class TestEngineRun:
    def test_population_run_filters_metric(self, population) -> None:
        files = [
            indicator_file(
                "pop.txt",
                population_rows("A", {"2000": 100, "2010": 70, "2015": 60})
                + business_rows("B", {"2000": 10}),
            )
        ]
        result = population.run(load_records(files))
        assert result.category == Category.DEMOGRAPHIC
        assert result.years == ("2000", "2010", "2015")
        assert [row.region_code for row in result.rows] == ["A"]

    def test_industry_run_uses_business_code(self, industry) -> None:
        files = [
            indicator_file(
                "biz.txt",
                business_rows("B", {"2020": 100, "2021": 90}) + population_rows("A", {"2020": 5}),
            )
        ]
        result = industry.run(load_records(files))
        assert result.category == Category.ECONOMIC
        assert [row.region_code for row in result.rows] == ["B"]
        assert result.rows[0].decline_rate == pytest.approx(-10.0)
        assert result.rows[0].met is True
