"""
Constrained shutdown scheduler.

Picks curtailment opportunities by their premium over the rolling baseline
instead of by raw price, and turns each one into a multi-hour shutdown block
that respects the operational constraints:

- blocks last at least ``minimum_shutdown_duration_hours`` and at most 8h;
  an opportunity without room for the minimum is skipped
- a week (ISO calendar week) holds at most ``maximum_shutdowns_per_week`` blocks
- the total curtailed hours never exceed the downtime budget

Constraint hits are collected as human readable violations; they never abort
the run.
"""

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Dict, List, Sequence, Set

from ..config import OperationalConstraints
from ..exceptions import InvalidParameterError
from ..models import BaselineSeries, PricePoint, ScheduleResult, ShutdownEvent
from .baseline import BaselineLookup

logger = logging.getLogger(__name__)

LOOKAHEAD_HOURS = 12
MAX_EVENT_HOURS = 8
HIGH_PRICE_RATIO = 1.10

ONE_HOUR = timedelta(hours=1)


def _consecutive_high_hours(
    series: Sequence[PricePoint],
    start: int,
    threshold: float,
    covered: Set[int]
) -> int:
    """Count hours from ``start`` on priced at or above ``threshold``."""
    count = 0
    for offset in range(LOOKAHEAD_HOURS):
        idx = start + offset
        if idx >= len(series) or idx in covered:
            break
        if offset and series[idx].datetime - series[idx - 1].datetime != ONE_HOUR:
            break
        if series[idx].price < threshold:
            break
        count += 1
    return count


def _available_block(
    series: Sequence[PricePoint],
    start: int,
    duration: int,
    covered: Set[int]
) -> List[int]:
    """Indexes of up to ``duration`` contiguous, uncovered hours from ``start``."""
    block = [start]
    for idx in range(start + 1, min(start + duration, len(series))):
        if idx in covered or series[idx].datetime - series[idx - 1].datetime != ONE_HOUR:
            break
        block.append(idx)
    return block


def schedule_shutdowns(
    series: Sequence[PricePoint],
    max_shutdown_hours: int,
    constraints: OperationalConstraints,
    baseline: BaselineSeries,
    transmission_adder: float = 0.0
) -> ScheduleResult:
    """
    Build a constraint-aware shutdown schedule.

    Args:
        series: Chronologically ordered hourly prices
        max_shutdown_hours: Downtime budget in hours
        constraints: Operational limits applied to every block
        baseline: Rolling baseline of the same series
        transmission_adder: Static transmission adder used for all-in savings;
            the constrained strategy reprices events with the dynamic bands

    Returns:
        ScheduleResult: Events in chronological order, hours used and the
        constraint violations met along the way
    """
    if max_shutdown_hours < 0:
        raise InvalidParameterError(
            "Shutdown budget cannot be negative",
            reason="too_low",
            context={"max_shutdown_hours": max_shutdown_hours}
        )

    lookup = BaselineLookup(baseline)
    baselines = [lookup.price_at(point.datetime) for point in series]

    opportunities = [
        (series[i].price - baselines[i], i)
        for i in range(len(series))
        if series[i].price - baselines[i] > 0
    ]
    # sorted() is stable, equal premiums stay in chronological order
    opportunities = sorted(opportunities, key=lambda item: item[0], reverse=True)

    events: List[ShutdownEvent] = []
    violations: List[str] = []
    covered: Set[int] = set()
    shutdowns_per_week: Dict[tuple, int] = defaultdict(int)
    operational_cost = (constraints.startup_cost_per_mw + constraints.shutdown_cost_per_mw) / 1000
    running_total = 0

    for premium, idx in opportunities:
        if running_total >= max_shutdown_hours:
            break
        if idx in covered:
            continue

        point = series[idx]
        iso = point.datetime.isocalendar()
        week = (iso[0], iso[1])
        if shutdowns_per_week[week] >= constraints.maximum_shutdowns_per_week:
            violations.append(
                f"Week {week[0]}-W{week[1]:02d}: skipped {point.datetime:%Y-%m-%d %H:00} "
                f"(premium {premium:.2f}), limit of "
                f"{constraints.maximum_shutdowns_per_week} shutdowns reached")
            continue

        reference = baselines[idx]
        consecutive = _consecutive_high_hours(series, idx, HIGH_PRICE_RATIO * reference, covered)
        duration = max(constraints.minimum_shutdown_duration_hours,
                       min(MAX_EVENT_HOURS, consecutive))

        block = _available_block(series, idx, duration, covered)
        if len(block) < duration:
            # Only the minimum duration can reach past the available hours
            violations.append(
                f"{point.datetime:%Y-%m-%d %H:00}: skipped, only {len(block)}h available "
                f"but the minimum shutdown is {duration}h")
            continue

        if running_total + duration > max_shutdown_hours:
            continue

        prices = [series[i].price for i in block]
        energy_savings = sum(prices)
        events.append(ShutdownEvent(
            date=point.date,
            start_hour=point.hour,
            datetime=point.datetime,
            duration_hours=duration,
            price=energy_savings / duration,
            peak_price=max(prices),
            baseline_price=reference,
            energy_savings=energy_savings,
            all_in_savings=energy_savings + transmission_adder * duration,
            operational_cost=operational_cost
        ))
        covered.update(block)
        shutdowns_per_week[week] += 1
        running_total += duration

    events.sort(key=lambda event: event.datetime)

    if violations:
        logger.warning(
            f"⚠️  {len(violations)} constraint violations while scheduling, "
            f"first: {violations[0]}")
    logger.info(
        f"Scheduled {len(events)} shutdowns covering {running_total}h "
        f"of a {max_shutdown_hours}h budget")

    return ScheduleResult(
        events=events,
        total_shutdown_hours=running_total,
        max_shutdown_hours=max_shutdown_hours,
        violations=violations
    )
