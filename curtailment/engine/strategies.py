"""
Selectable curtailment strategies.

``deterministic`` curtails the most expensive single hours; ``constrained``
builds multi-hour shutdown blocks against a rolling baseline and prices them
with the cost and risk calculator. Both return an AnalysisResult.
"""

import logging
import math
from enum import Enum
from typing import Any, Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import InsufficientDataError, InvalidParameterError
from ..models import AnalysisResult, PricePoint
from .baseline import compute_rolling_baseline
from .cost_risk import calculate_cost_and_risk, event_all_in_savings
from .shutdown_scheduler import schedule_shutdowns
from .uptime_optimizer import (
    MAX_UPTIME_PERCENT,
    allowed_downtime_hours,
    optimize_uptime,
    price_distribution,
    validate_uptime_target
)

logger = logging.getLogger(__name__)


class AnalysisStrategy(str, Enum):
    """Available curtailment strategies."""
    DETERMINISTIC = "deterministic"
    CONSTRAINED = "constrained"

    @classmethod
    def parse(cls, value: Any) -> "AnalysisStrategy":
        """Get a strategy from its name, case insensitive."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidParameterError(
                f"Unknown strategy {value!r}, expected one of "
                f"{', '.join(s.value for s in cls)}",
                context={"strategy": value}
            )


def run_constrained(
    series: Sequence[PricePoint],
    target_uptime_percent: Any,
    config: Optional[AnalysisConfig] = None
) -> AnalysisResult:
    """
    Schedule constraint-aware shutdown blocks within the uptime budget.

    The downtime budget is derived from the uptime target exactly like the
    deterministic optimizer; the schedule is then priced including
    operational costs, dynamic transmission charges and Monte Carlo risk.
    Event and total all-in savings use the price-banded transmission adder.
    """
    config = config or AnalysisConfig()
    target = validate_uptime_target(target_uptime_percent)

    if not series:
        raise InsufficientDataError(
            "No price series available, no optimization possible",
            context={"target_uptime_percent": target, "strategy": "constrained"})

    total_hours = len(series)
    allowed = 0 if target >= MAX_UPTIME_PERCENT else allowed_downtime_hours(total_hours, target)

    baseline = compute_rolling_baseline(series, config.baseline_window_days)
    schedule = schedule_shutdowns(
        series, allowed, config.constraints, baseline, config.transmission_adder)
    events = [
        event.model_copy(update={"all_in_savings": event_all_in_savings(event, config)})
        for event in schedule.events
    ]
    risk = calculate_cost_and_risk(events, series, baseline, config)

    original_average = math.fsum(p.price for p in series) / total_hours
    total_savings = math.fsum(event.energy_savings for event in events)
    total_all_in_savings = math.fsum(event.all_in_savings for event in events)
    shutdown_hours = schedule.total_shutdown_hours

    return AnalysisResult(
        strategy=AnalysisStrategy.CONSTRAINED.value,
        target_uptime_percent=target,
        total_hours=total_hours,
        allowed_downtime_hours=allowed,
        total_shutdown_hours=shutdown_hours,
        downtime_percentage=shutdown_hours / total_hours * 100,
        total_savings=total_savings,
        total_all_in_savings=total_all_in_savings,
        average_savings=total_savings / shutdown_hours if shutdown_hours else 0.0,
        original_average=original_average,
        new_average_price=risk.new_average_price,
        original_all_in_average=original_average + config.transmission_adder,
        new_all_in_average=risk.new_average_price + config.transmission_adder,
        transmission_adder=config.transmission_adder,
        period_start=series[0].datetime,
        period_end=series[-1].datetime,
        uses_synthetic_data=any(p.is_synthetic for p in series),
        events=events,
        price_distribution=price_distribution(series),
        violations=schedule.violations,
        risk=risk
    )


def run_strategy(
    strategy: Any,
    series: Sequence[PricePoint],
    target_uptime_percent: Any,
    config: Optional[AnalysisConfig] = None
) -> AnalysisResult:
    """Run the named strategy over a normalized series."""
    strategy = AnalysisStrategy.parse(strategy)
    logger.info(f"Running {strategy.value} strategy")

    if strategy is AnalysisStrategy.CONSTRAINED:
        return run_constrained(series, target_uptime_percent, config)
    return optimize_uptime(series, target_uptime_percent, config)
