"""
Optimization engine.

Pure functions of (price series, parameters); nothing here touches the
database, the network or the global configuration.
"""

from .normalizer import normalize_price_series, window_for_days
from .synthetic import HOURLY_MULTIPLIERS, expand_daily_averages, multiplier_for_hour
from .baseline import BaselineLookup, compute_rolling_baseline, confidence_from
from .uptime_optimizer import (
    allowed_downtime_hours,
    kept_hours,
    optimize_uptime,
    partition_by_price,
    price_distribution,
    validate_uptime_target
)
from .shutdown_scheduler import schedule_shutdowns
from .cost_risk import (
    calculate_cost_and_risk,
    dynamic_transmission_adder,
    event_all_in_savings,
    simulate_savings
)
from .strategies import AnalysisStrategy, run_constrained, run_strategy
from .scenarios import run_scenarios
from .strike_price import DEFAULT_SWEEP_THRESHOLDS, analyze_strike_price, threshold_sweep
from .market_stats import market_statistics, yearly_uptime_summary

__all__ = [
    "normalize_price_series",
    "window_for_days",
    "HOURLY_MULTIPLIERS",
    "expand_daily_averages",
    "multiplier_for_hour",
    "BaselineLookup",
    "compute_rolling_baseline",
    "confidence_from",
    "allowed_downtime_hours",
    "kept_hours",
    "optimize_uptime",
    "partition_by_price",
    "price_distribution",
    "validate_uptime_target",
    "schedule_shutdowns",
    "calculate_cost_and_risk",
    "dynamic_transmission_adder",
    "event_all_in_savings",
    "simulate_savings",
    "AnalysisStrategy",
    "run_constrained",
    "run_strategy",
    "run_scenarios",
    "DEFAULT_SWEEP_THRESHOLDS",
    "analyze_strike_price",
    "threshold_sweep",
    "market_statistics",
    "yearly_uptime_summary"
]
