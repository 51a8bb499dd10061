"""
Constrained Shutdown Scheduler Tests

This test suite validates:
- Weekly shutdown limits and the violations they produce
- Lookahead extension and the 8 hour cap per event
- The downtime budget is never exceeded
- Minimum durations shortened at the end of the series
"""

import pytest

from curtailment.config import OperationalConstraints
from curtailment.engine.baseline import compute_rolling_baseline
from curtailment.engine.shutdown_scheduler import MAX_EVENT_HOURS, schedule_shutdowns
from curtailment.exceptions import InvalidParameterError


# ==================== FIXTURES ====================

@pytest.fixture
def plateau_series(make_series):
    """Two days at 20 $/MWh with a 12 hour plateau at 300 $/MWh from 10:00."""
    return make_series([300.0 if 10 <= i < 22 else 20.0 for i in range(48)])


@pytest.fixture
def spike_series(make_series):
    """Two days at 10 $/MWh with single-hour spikes to 200 $/MWh."""
    return make_series([200.0 if i in (5, 15, 25, 35) else 10.0 for i in range(48)])


def schedule(series, budget, constraints=None, adder=0.0):
    baseline = compute_rolling_baseline(series, window_days=30)
    return schedule_shutdowns(
        series, budget, constraints or OperationalConstraints(), baseline, adder)


# ==================== TESTS ====================

class TestWeeklyLimit:

    def test_excess_opportunities_are_skipped_and_reported(self, spike_series):
        constraints = OperationalConstraints(
            minimum_shutdown_duration_hours=1, maximum_shutdowns_per_week=2)
        result = schedule(spike_series, 10, constraints)

        assert [e.start_hour for e in result.events] == [5, 15]
        assert result.total_shutdown_hours == 2
        assert len(result.violations) == 2
        assert all("limit of 2 shutdowns" in v for v in result.violations)

    def test_limits_apply_per_iso_week(self, make_series):
        # 2024-01-07 is a Sunday, 2024-01-08 starts ISO week 2
        prices = [10.0] * (8 * 24)
        for day in (5, 6, 7):
            prices[day * 24 + 12] = 200.0
        constraints = OperationalConstraints(
            minimum_shutdown_duration_hours=1, maximum_shutdowns_per_week=1)
        result = schedule(make_series(prices), 10, constraints)

        assert [e.date.isoformat() for e in result.events] == ["2024-01-06", "2024-01-08"]
        assert len(result.violations) == 1


class TestLookahead:

    def test_blocks_are_capped_at_eight_hours(self, plateau_series):
        result = schedule(plateau_series, 20)

        assert [e.duration_hours for e in result.events] == [MAX_EVENT_HOURS, 4]
        assert [e.start_hour for e in result.events] == [10, 18]
        assert result.total_shutdown_hours == 12

    def test_event_figures(self, plateau_series):
        first = schedule(plateau_series, 20, adder=11.63).events[0]

        assert first.price == pytest.approx(300.0)
        assert first.peak_price == pytest.approx(300.0)
        assert first.baseline_price == pytest.approx(90.0)
        assert first.energy_savings == pytest.approx(2400.0)
        assert first.all_in_savings == pytest.approx(2400.0 + 8 * 11.63)
        assert first.operational_cost == pytest.approx(0.075)

    def test_minimum_duration_applies_to_short_spikes(self, spike_series):
        result = schedule(spike_series, 10)

        assert all(e.duration_hours == 2 for e in result.events)
        assert result.events[0].peak_price == 200.0
        assert result.events[0].price == pytest.approx(105.0)

    def test_no_room_for_minimum_at_end_of_series(self, make_series):
        series = make_series([10.0] * 23 + [500.0])
        result = schedule(series, 5)

        assert result.events == []
        assert result.total_shutdown_hours == 0
        assert len(result.violations) == 1
        assert "minimum shutdown is 2h" in result.violations[0]

    def test_no_room_for_minimum_before_covered_hour(self, make_series):
        series = make_series([10.0] * 5 + [200.0, 300.0] + [10.0] * 41)
        result = schedule(series, 10)

        assert [(e.start_hour, e.duration_hours) for e in result.events] == [(6, 2)]
        assert result.total_shutdown_hours == 2
        assert len(result.violations) == 1
        assert result.violations[0].startswith("2024-01-01 05:00: skipped")

    @pytest.mark.parametrize("minimum", [1, 2, 3])
    def test_every_event_meets_minimum(self, volatile_series, minimum):
        constraints = OperationalConstraints(minimum_shutdown_duration_hours=minimum)
        result = schedule(volatile_series, 40, constraints)

        assert result.events
        assert all(e.duration_hours >= minimum for e in result.events)


class TestBudget:

    def test_budget_is_never_exceeded(self, plateau_series):
        result = schedule(plateau_series, 10)

        assert result.total_shutdown_hours == 10
        assert [(e.start_hour, e.duration_hours) for e in result.events] == [(10, 8), (20, 2)]

    @pytest.mark.parametrize("budget", [0, 1, 3, 7, 15])
    def test_total_within_budget(self, volatile_series, budget):
        result = schedule(volatile_series, budget)

        assert result.total_shutdown_hours <= budget
        assert sum(e.duration_hours for e in result.events) == result.total_shutdown_hours

    def test_events_do_not_overlap_and_are_chronological(self, volatile_series):
        result = schedule(volatile_series, 40)
        covered = []
        for event in result.events:
            hours = [event.datetime.timestamp() + 3600 * k for k in range(event.duration_hours)]
            covered.extend(hours)

        assert len(covered) == len(set(covered))
        assert [e.datetime for e in result.events] == sorted(e.datetime for e in result.events)

    def test_zero_budget_schedules_nothing(self, plateau_series):
        result = schedule(plateau_series, 0)

        assert result.events == []
        assert result.total_shutdown_hours == 0

    def test_negative_budget_is_rejected(self, plateau_series):
        with pytest.raises(InvalidParameterError):
            schedule(plateau_series, -1)

    def test_no_positive_premium_means_no_events(self, flat_series):
        assert schedule(flat_series, 10).events == []
