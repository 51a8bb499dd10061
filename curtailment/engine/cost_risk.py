"""
Cost and risk calculation for a shutdown schedule.

Turns a list of shutdown events into net savings after operational costs,
price-dependent transmission charges and two risk haircuts, and runs a
Monte Carlo simulation to show how robust the savings are to price error.
"""

import logging
import math
from datetime import timedelta
from typing import Optional, Sequence

import numpy as np

from ..config import AnalysisConfig
from ..models import (
    BaselineSeries,
    CostRiskResult,
    MonteCarloSummary,
    PricePoint,
    ShutdownEvent
)

logger = logging.getLogger(__name__)

RISK_WEIGHT = 0.3
VOLATILITY_WEIGHT = 0.2

PRICE_PERTURBATION = 0.20
BASELINE_PERTURBATION = 0.15
MIN_EFFICIENCY = 0.85
MAX_EFFICIENCY = 1.0


def dynamic_transmission_adder(price: float, config: AnalysisConfig) -> float:
    """Scale the static transmission adder by the energy price band."""
    adder = config.transmission_adder
    if price > config.high_price_threshold:
        return adder * config.high_price_multiplier
    if price > config.medium_price_threshold:
        return adder * config.medium_price_multiplier
    if price < config.low_price_threshold:
        return adder * config.low_price_multiplier
    return adder


def event_all_in_savings(event: ShutdownEvent, config: AnalysisConfig) -> float:
    """Energy savings plus the dynamic transmission charge avoided by an event."""
    return event.energy_savings + \
        dynamic_transmission_adder(event.price, config) * event.duration_hours


def event_operational_cost(config: AnalysisConfig) -> float:
    """Start/stop cost of one event, per MWh of a 1 MW load."""
    constraints = config.constraints
    return (constraints.startup_cost_per_mw + constraints.shutdown_cost_per_mw) / 1000


def simulate_savings(
    events: Sequence[ShutdownEvent],
    iterations: int = 1000,
    seed: Optional[int] = None
) -> Optional[MonteCarloSummary]:
    """
    Monte Carlo distribution of the premium captured by a schedule.

    Every iteration draws a price factor in [0.8, 1.2] and a baseline factor
    in [0.85, 1.15] per event, plus one operational efficiency factor in
    [0.85, 1.0] for the whole schedule, and sums
    ``(price' - baseline') * duration * efficiency`` over the events.

    Returns:
        MonteCarloSummary or None when there are no events to simulate
    """
    if not events:
        return None

    rng = np.random.default_rng(seed)
    prices = np.array([event.price for event in events])
    baselines = np.array([event.baseline_price for event in events])
    durations = np.array([event.duration_hours for event in events])

    shape = (iterations, len(events))
    price_factor = rng.uniform(1 - PRICE_PERTURBATION, 1 + PRICE_PERTURBATION, shape)
    baseline_factor = rng.uniform(1 - BASELINE_PERTURBATION, 1 + BASELINE_PERTURBATION, shape)
    efficiency = rng.uniform(MIN_EFFICIENCY, MAX_EFFICIENCY, (iterations, 1))

    savings = (prices * price_factor - baselines * baseline_factor) * durations * efficiency
    totals = savings.sum(axis=1)

    return MonteCarloSummary(
        iterations=iterations,
        expected_value=float(np.mean(totals)),
        std_dev=float(np.std(totals)),
        percentile_5=float(np.percentile(totals, 5)),
        percentile_95=float(np.percentile(totals, 95)),
        min_value=float(np.min(totals)),
        max_value=float(np.max(totals)),
        probability_of_profit=float(np.mean(totals > 0))
    )


def _average_outside_events(
    series: Sequence[PricePoint],
    events: Sequence[ShutdownEvent]
) -> float:
    """Mean price of the hours not covered by any event."""
    curtailed = set()
    for event in events:
        for offset in range(event.duration_hours):
            curtailed.add(event.datetime + timedelta(hours=offset))

    running = [p.price for p in series if p.datetime not in curtailed]
    if not running:
        running = [p.price for p in series]
    return math.fsum(running) / len(running)


def calculate_cost_and_risk(
    events: Sequence[ShutdownEvent],
    series: Sequence[PricePoint],
    baseline: BaselineSeries,
    config: Optional[AnalysisConfig] = None,
    simulate: bool = True
) -> CostRiskResult:
    """
    Price a shutdown schedule.

    Args:
        events: Scheduled shutdown events
        series: The hourly series the events were scheduled on
        baseline: Rolling baseline of that series
        config: Per-call analysis configuration
        simulate: Run the Monte Carlo simulation

    Returns:
        CostRiskResult: Gross and net savings, costs and risk figures
    """
    config = config or AnalysisConfig()

    gross_savings = math.fsum(event.energy_savings for event in events)
    gross_all_in_savings = math.fsum(event_all_in_savings(event, config) for event in events)
    operational_costs = len(events) * event_operational_cost(config)
    transmission_cost_variation = math.fsum(
        (dynamic_transmission_adder(event.price, config) - config.transmission_adder)
        * event.duration_hours
        for event in events
    )

    risk_adjustment = gross_savings * (1 - baseline.confidence) * RISK_WEIGHT
    # Relative volatility (std / |average|), not the $/MWh std
    volatility_adjustment = gross_savings * baseline.relative_volatility * VOLATILITY_WEIGHT
    net_savings = gross_savings - risk_adjustment - volatility_adjustment
    net_all_in_savings = gross_all_in_savings - risk_adjustment - volatility_adjustment

    projected_roi = net_savings / operational_costs * 100 if operational_costs > 0 else 0.0

    monte_carlo = None
    if simulate:
        monte_carlo = simulate_savings(
            events, config.monte_carlo_iterations, config.monte_carlo_seed)

    result = CostRiskResult(
        gross_savings=gross_savings,
        gross_all_in_savings=gross_all_in_savings,
        operational_costs=operational_costs,
        transmission_cost_variation=transmission_cost_variation,
        risk_adjustment=risk_adjustment,
        volatility_adjustment=volatility_adjustment,
        net_savings=net_savings,
        net_all_in_savings=net_all_in_savings,
        new_average_price=_average_outside_events(series, events) if series else 0.0,
        confidence_level=baseline.confidence,
        projected_roi=projected_roi,
        monte_carlo=monte_carlo
    )

    logger.info(
        f"Schedule of {len(events)} events: gross {gross_savings:.2f}, "
        f"net {net_savings:.2f}, ROI {projected_roi:.1f}%")
    return result
