"""
Synthetic Hourly Expander Tests
"""

from datetime import date

import pytest

from curtailment.engine.synthetic import (
    HOURLY_MULTIPLIERS,
    expand_daily_averages,
    multiplier_for_hour
)
from curtailment.exceptions import InvalidParameterError


class TestMultiplierCurve:

    def test_curve_has_24_hours_and_averages_to_one(self):
        assert len(HOURLY_MULTIPLIERS) == 24
        assert sum(HOURLY_MULTIPLIERS) / 24 == pytest.approx(1.0, rel=1e-12)

    def test_shape(self):
        assert max(HOURLY_MULTIPLIERS) == multiplier_for_hour(17) == 1.40
        assert min(HOURLY_MULTIPLIERS[0:7]) >= 0.78
        assert multiplier_for_hour(23) == 0.88

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_hour_out_of_range(self, hour):
        with pytest.raises(InvalidParameterError):
            multiplier_for_hour(hour)


class TestExpandDailyAverages:

    @pytest.mark.parametrize("average", [0.01, 42.5, 87.3, 1234.56])
    def test_daily_mean_is_preserved(self, average):
        points = expand_daily_averages([{"date": "2024-03-10"}], period_average=average)
        mean = sum(p.price for p in points) / len(points)

        assert len(points) == 24
        assert mean == pytest.approx(average, rel=1e-6)

    def test_record_average_overrides_period_average(self):
        points = expand_daily_averages(
            [{"date": date(2024, 1, 1), "average_price": 80.0}, {"date": date(2024, 1, 2)}],
            period_average=40.0
        )
        day_one = [p.price for p in points if p.date == date(2024, 1, 1)]
        day_two = [p.price for p in points if p.date == date(2024, 1, 2)]

        assert sum(day_one) / 24 == pytest.approx(80.0)
        assert sum(day_two) / 24 == pytest.approx(40.0)

    def test_missing_record_average_uses_period_average(self):
        points = expand_daily_averages(
            [{"date": "2024-01-01", "average_price": float("nan")}], period_average=30.0)

        assert sum(p.price for p in points) / 24 == pytest.approx(30.0)

    def test_points_are_synthetic_and_chronological(self):
        points = expand_daily_averages(
            [{"date": "2024-01-02"}, {"date": "2024-01-01"}], period_average=50.0)

        assert all(p.is_synthetic for p in points)
        assert [p.datetime for p in points] == sorted(p.datetime for p in points)
        assert points[0].date == date(2024, 1, 1)
        assert points[17].price == pytest.approx(70.0)

    def test_no_average_available(self):
        with pytest.raises(InvalidParameterError):
            expand_daily_averages([{"date": "2024-01-01"}])

    def test_missing_date(self):
        with pytest.raises(InvalidParameterError):
            expand_daily_averages([{"average_price": 10.0}])
