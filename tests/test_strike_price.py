"""
Strike Price and Threshold Sweep Tests
"""

import pytest

from curtailment.config import AnalysisConfig
from curtailment.engine.strike_price import (
    DEFAULT_SWEEP_THRESHOLDS,
    analyze_strike_price,
    threshold_sweep
)
from curtailment.exceptions import InsufficientDataError, InvalidParameterError


class TestStrikePrice:

    def test_hours_at_or_above_strike_are_curtailed(self, ramp_series):
        result = analyze_strike_price(ramp_series, 200, AnalysisConfig(transmission_adder=10.0))

        assert result.strategy == "strike_price"
        assert result.strike_price == 200.0
        assert [e.price for e in result.events] == [200.0, 210.0, 220.0, 230.0, 240.0]
        assert result.total_shutdown_hours == 5
        assert result.total_savings == pytest.approx(1100.0)
        assert result.total_all_in_savings == pytest.approx(1150.0)
        assert result.target_uptime_percent == pytest.approx(79.17)
        assert result.new_average_price == pytest.approx(100.0)

    def test_strike_above_every_price(self, ramp_series):
        result = analyze_strike_price(ramp_series, 1000)

        assert result.total_shutdown_hours == 0
        assert result.target_uptime_percent == 100.0
        assert result.new_average_price == pytest.approx(result.original_average)

    def test_numeric_string_is_accepted(self, ramp_series):
        assert analyze_strike_price(ramp_series, "200").total_shutdown_hours == 5

    @pytest.mark.parametrize("strike", ["abc", None, float("nan"), True])
    def test_invalid_strike(self, ramp_series, strike):
        with pytest.raises(InvalidParameterError) as exc_info:
            analyze_strike_price(ramp_series, strike)
        assert exc_info.value.reason == "not_a_number"

    def test_empty_series(self):
        with pytest.raises(InsufficientDataError):
            analyze_strike_price([], 100)


class TestThresholdSweep:

    def test_operating_profile(self, ramp_series):
        rows = {row.threshold: row for row in threshold_sweep(ramp_series, [20, 100, 500])}

        assert rows[20].operating_hours == 1
        assert rows[20].average_operating_cost == pytest.approx(10.0)
        assert rows[100].operating_hours == 9
        assert rows[100].percent_time_operating == pytest.approx(37.5)
        assert rows[100].average_operating_cost == pytest.approx(50.0)
        assert rows[500].operating_hours == 24
        assert rows[500].percent_time_operating == pytest.approx(100.0)
        assert rows[500].average_operating_cost == pytest.approx(125.0)

    def test_default_thresholds(self, ramp_series):
        rows = threshold_sweep(ramp_series)

        assert [row.threshold for row in rows] == [float(t) for t in DEFAULT_SWEEP_THRESHOLDS]
        hours = [row.operating_hours for row in rows]
        assert hours == sorted(hours)

    def test_threshold_below_every_price(self, ramp_series):
        row = threshold_sweep(ramp_series, [5])[0]

        assert row.operating_hours == 0
        assert row.average_operating_cost == 0.0
