"""Tests for curve sampling and price-level conversion."""

import csv
import io

import pytest

from taxcurve.sdk.inflation import InflationAdjuster, OutOfRangeError
from taxcurve.sdk.sampling import (
    CurvePoint,
    average_rate_curve,
    marginal_rate_points,
    marginal_rate_points_extended,
    points_to_csv_string,
    sample_curve,
    tax_amount_curve,
    to_price_level,
)
from taxcurve.sdk.schemas import TaxScheduleParams
from taxcurve.sdk.taxes import InvalidInputError, TaxSchedule


@pytest.fixture
def schedule():
    return TaxSchedule(TaxScheduleParams(
        year=2024,
        e0=11604, e1=17005, e2=66760, e3=277825,
        s1=1025.38, s2=17437.07, s3=106084.37,
        p1=9.2298e-6, p2=1.8119e-6,
        sg1=0.14, sg2=0.2397, sg3=0.42, sg4=0.45,
    ))


class TestSampleCurve:
    def test_default_range(self, schedule):
        points = average_rate_curve(schedule)
        assert len(points) == 1001
        assert points[0].income == 0
        assert points[-1].income == 277825 + 100_000
        assert all(p.kind == "average_rate" for p in points)

    def test_evenly_spaced(self, schedule):
        points = tax_amount_curve(schedule, start=1000, end=300000, steps=4)
        assert [p.income for p in points] == pytest.approx([1000, 75750, 150500, 225250, 300000])

    def test_values_match_schedule(self, schedule):
        points = sample_curve(schedule, "marginal_rate", steps=10)
        for point in points:
            assert point.value == schedule.marginal_rate(point.income)

    def test_start_at_e0_allowed(self, schedule):
        points = tax_amount_curve(schedule, start=11604, end=277825, steps=1)
        assert [p.income for p in points] == [11604, 277825]

    @pytest.mark.parametrize("kwargs", [
        {"start": -1},
        {"start": 11605},
        {"end": 277824},
        {"steps": 0},
    ])
    def test_bounds_rejected(self, schedule, kwargs):
        with pytest.raises(InvalidInputError):
            tax_amount_curve(schedule, **kwargs)


class TestMarginalRatePoints:
    def test_anchors(self, schedule):
        points = marginal_rate_points(schedule)
        assert [(p.income, p.value) for p in points] == [
            (11604, 0.14),
            (17005, 0.2397),
            (66760, 0.42),
            (277825, 0.45),
        ]

    def test_extended_order(self, schedule):
        points = marginal_rate_points_extended(schedule)
        assert [(p.income, p.value) for p in points] == [
            (0, 0.0),
            (11604, 0.0),
            (11604, 0.14),
            (17005, 0.2397),
            (66760, 0.42),
            (277825, 0.42),
            (277825, 0.45),
            (377825, 0.45),
        ]

    def test_extended_custom_end(self, schedule):
        points = marginal_rate_points_extended(schedule, end=500000)
        assert points[-1] == CurvePoint(income=500000, value=0.45, kind="marginal_rate")

    def test_extended_end_below_top_threshold_rejected(self, schedule):
        with pytest.raises(InvalidInputError):
            marginal_rate_points_extended(schedule, end=200000)


class TestToPriceLevel:
    @pytest.fixture
    def adjuster(self):
        return InflationAdjuster({2023: 5.9, 2024: 10.0})

    def test_amounts_scaled(self, schedule, adjuster):
        points = [CurvePoint(income=1000, value=100, kind="tax_amount")]
        converted = to_price_level(points, adjuster, 2023, 2024)
        assert converted[0].income == pytest.approx(1100)
        assert converted[0].value == pytest.approx(110)

    def test_rates_keep_value(self, schedule, adjuster):
        points = marginal_rate_points(schedule)
        converted = to_price_level(points, adjuster, 2024, 2023)
        assert [p.value for p in converted] == [p.value for p in points]
        assert converted[0].income == pytest.approx(11604 / 1.1)

    def test_original_points_untouched(self, schedule, adjuster):
        points = tax_amount_curve(schedule, steps=2)
        to_price_level(points, adjuster, 2023, 2024)
        assert points[0].income == 0

    def test_year_out_of_range(self, schedule, adjuster):
        with pytest.raises(OutOfRangeError):
            to_price_level(marginal_rate_points(schedule), adjuster, 2020, 2024)


class TestCsv:
    def test_header_and_rows(self, schedule):
        text = points_to_csv_string(marginal_rate_points(schedule))
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[0] == ["kind", "income", "value"]
        assert rows[1] == ["marginal_rate", "11604.0", "0.14"]
        assert len(rows) == 5
