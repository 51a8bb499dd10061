"""
Cost & Risk Calculator Tests

This test suite validates:
- Dynamic transmission bands
- Gross to net savings with risk and volatility haircuts
- Operational costs and the ROI division guard
- Monte Carlo reproducibility and percentile ordering
"""

from datetime import datetime

import pytest

from curtailment.config import AnalysisConfig
from curtailment.engine.cost_risk import (
    calculate_cost_and_risk,
    dynamic_transmission_adder,
    event_all_in_savings,
    simulate_savings
)
from curtailment.models import BaselineSeries, ShutdownEvent


# ==================== FIXTURES ====================

def make_event(price, baseline_price=50.0, duration=1, start=datetime(2024, 1, 1, 3)):
    return ShutdownEvent(
        date=start.date(),
        start_hour=start.hour,
        datetime=start,
        duration_hours=duration,
        price=price,
        peak_price=price,
        baseline_price=baseline_price,
        energy_savings=price * duration,
        all_in_savings=(price + 11.63) * duration,
        operational_cost=0.075
    )


@pytest.fixture
def baseline():
    return BaselineSeries(
        window_hours=720,
        windows=[],
        average=50.0,
        volatility=10.0,
        confidence=0.8,
        overall_average=50.0,
        is_fallback=True
    )


@pytest.fixture
def config():
    return AnalysisConfig(transmission_adder=11.63, monte_carlo_iterations=1000,
                          monte_carlo_seed=7)


# ==================== TRANSMISSION ====================

class TestDynamicTransmission:

    def test_medium_band_event(self, config):
        event = make_event(100.0)

        assert dynamic_transmission_adder(100.0, config) == pytest.approx(13.37, abs=0.01)
        assert event_all_in_savings(event, config) == pytest.approx(113.37, abs=0.01)

    @pytest.mark.parametrize("price,multiplier", [
        (151.0, 1.3),
        (150.0, 1.15),
        (75.01, 1.15),
        (75.0, 1.0),
        (25.0, 1.0),
        (24.99, 0.8),
        (-10.0, 0.8),
    ])
    def test_bands(self, config, price, multiplier):
        assert dynamic_transmission_adder(price, config) == pytest.approx(11.63 * multiplier)

    def test_all_in_scales_with_duration(self, config):
        event = make_event(200.0, duration=3)

        assert event_all_in_savings(event, config) == pytest.approx(600.0 + 3 * 11.63 * 1.3)


# ==================== NET SAVINGS ====================

class TestCostAndRisk:

    def test_single_event(self, make_series, baseline, config):
        series = make_series([10.0, 20.0, 30.0, 100.0])
        event = make_event(100.0)
        result = calculate_cost_and_risk([event], series, baseline, config)

        assert result.gross_savings == pytest.approx(100.0)
        assert result.risk_adjustment == pytest.approx(6.0)
        assert result.volatility_adjustment == pytest.approx(4.0)
        assert result.net_savings == pytest.approx(90.0)
        assert result.gross_all_in_savings == pytest.approx(100.0 + 11.63 * 1.15)
        assert result.net_all_in_savings == pytest.approx(90.0 + 11.63 * 1.15)
        assert result.transmission_cost_variation == pytest.approx(11.63 * 0.15)
        assert result.operational_costs == pytest.approx(0.075)
        assert result.projected_roi == pytest.approx(90.0 / 0.075 * 100)
        assert result.new_average_price == pytest.approx(20.0)
        assert result.confidence_level == pytest.approx(0.8)

    def test_volatility_haircut_is_relative_to_baseline(self, make_series, baseline, config):
        wide = baseline.model_copy(update={"average": 40.0, "volatility": 60.0})
        result = calculate_cost_and_risk(
            [make_event(100.0)], make_series([100.0]), wide, config, simulate=False)

        # 60 $/MWh std on a 40 $/MWh average is 1.5x the average
        assert result.volatility_adjustment == pytest.approx(100.0 * 1.5 * 0.2)
        assert result.volatility_adjustment < result.gross_savings

    def test_multi_hour_event_excludes_all_its_hours(self, make_series, baseline, config):
        series = make_series([10.0, 20.0, 300.0, 300.0, 40.0])
        event = make_event(300.0, duration=2, start=datetime(2024, 1, 1, 2))
        result = calculate_cost_and_risk([event], series, baseline, config)

        assert result.new_average_price == pytest.approx(
            (10.0 + 20.0 + 40.0) / 3)
        assert result.transmission_cost_variation == pytest.approx(2 * 11.63 * 0.3)

    def test_no_events_guards_roi(self, make_series, baseline, config):
        result = calculate_cost_and_risk([], make_series([10.0, 20.0]), baseline, config)

        assert result.operational_costs == 0.0
        assert result.projected_roi == 0.0
        assert result.net_savings == 0.0
        assert result.monte_carlo is None
        assert result.new_average_price == pytest.approx(15.0)

    def test_simulation_can_be_skipped(self, make_series, baseline, config):
        result = calculate_cost_and_risk(
            [make_event(100.0)], make_series([100.0]), baseline, config, simulate=False)

        assert result.monte_carlo is None


# ==================== MONTE CARLO ====================

class TestMonteCarlo:

    def test_same_seed_same_distribution(self):
        events = [make_event(120.0, 60.0), make_event(90.0, 70.0, duration=3)]

        assert simulate_savings(events, 500, seed=11) == simulate_savings(events, 500, seed=11)
        assert simulate_savings(events, 500, seed=11) != simulate_savings(events, 500, seed=12)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_percentile_band_contains_expected_value(self, seed):
        events = [make_event(120.0, 60.0), make_event(80.0, 75.0, duration=4),
                  make_event(300.0, 90.0, duration=2)]
        summary = simulate_savings(events, 1000, seed=seed)

        assert summary.iterations == 1000
        assert summary.min_value <= summary.percentile_5 <= summary.expected_value
        assert summary.expected_value <= summary.percentile_95 <= summary.max_value
        assert 0.0 <= summary.probability_of_profit <= 1.0
        assert summary.std_dev > 0

    def test_wide_premium_is_always_profitable(self):
        summary = simulate_savings([make_event(200.0, 50.0)], 1000, seed=3)

        assert summary.probability_of_profit == 1.0
        # Price in [160, 240], baseline in [42.5, 57.5], efficiency in [0.85, 1]
        assert summary.min_value >= (160.0 - 57.5) * 0.85
        assert summary.max_value <= 240.0 - 42.5

    def test_no_events(self):
        assert simulate_savings([], 1000, seed=1) is None

    def test_attached_to_cost_and_risk(self, make_series, baseline, config):
        result = calculate_cost_and_risk(
            [make_event(100.0)], make_series([20.0, 100.0]), baseline, config)

        assert result.monte_carlo is not None
        assert result.monte_carlo.iterations == config.monte_carlo_iterations
