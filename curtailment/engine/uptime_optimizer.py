"""
Deterministic uptime optimizer.

Ranks every hour of the window by price and curtails the most expensive
hours until the downtime budget implied by the uptime target is spent:

    allowed_downtime_hours = floor(total_hours * (1 - target / 100))

Equal prices keep their chronological order (stable sort), so identical input
always yields an identical result.
"""

import logging
import math
from decimal import Decimal, ROUND_FLOOR
from typing import Any, List, Optional, Sequence, Tuple

from ..config import AnalysisConfig
from ..exceptions import (
    ComputationInvariantError,
    InsufficientDataError,
    InvalidParameterError
)
from ..models import AnalysisResult, PriceBucket, PricePoint, ShutdownEvent

logger = logging.getLogger(__name__)

MIN_UPTIME_PERCENT = 50.0
MAX_UPTIME_PERCENT = 100.0

# (label, inclusive lower bound, exclusive upper bound)
DISTRIBUTION_BUCKETS = [
    ("$0", None, 1.0),
    ("$1-10", 1.0, 11.0),
    ("$11-25", 11.0, 26.0),
    ("$26-50", 26.0, 51.0),
    ("$51-75", 51.0, 76.0),
    ("$76-100", 76.0, 101.0),
    ("$101-150", 101.0, 151.0),
    ("$151+", 151.0, None),
]


def validate_uptime_target(value: Any) -> float:
    """
    Validate an uptime target and round it to two decimals.

    Raises:
        InvalidParameterError: With reason ``not_a_number``, ``too_low`` or
        ``too_high``
    """
    context = {"target_uptime_percent": value}

    if isinstance(value, bool):
        raise InvalidParameterError(
            f"Target uptime must be a number, got {value!r}",
            reason="not_a_number", context=context)
    try:
        target = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(
            f"Target uptime must be a number, got {value!r}",
            reason="not_a_number", context=context)

    if math.isnan(target) or math.isinf(target):
        raise InvalidParameterError(
            f"Target uptime must be a finite number, got {value!r}",
            reason="not_a_number", context=context)
    if target < MIN_UPTIME_PERCENT:
        raise InvalidParameterError(
            f"Target uptime {target}% is too low, minimum is {MIN_UPTIME_PERCENT:.0f}%",
            reason="too_low", context=context)
    if target > MAX_UPTIME_PERCENT:
        raise InvalidParameterError(
            f"Target uptime {target}% is too high, maximum is {MAX_UPTIME_PERCENT:.0f}%",
            reason="too_high", context=context)

    return round(target, 2)


def allowed_downtime_hours(total_hours: int, target_uptime_percent: float) -> int:
    """Get the curtailment budget for a window, computed in decimal arithmetic."""
    downtime_fraction = (Decimal(100) - Decimal(str(target_uptime_percent))) / Decimal(100)
    hours = (Decimal(total_hours) * downtime_fraction).to_integral_value(rounding=ROUND_FLOOR)
    return max(int(hours), 0)


def kept_hours(total_hours: int, uptime_percent: float) -> int:
    """Get ``floor(total_hours * uptime / 100)`` in decimal arithmetic."""
    hours = (Decimal(total_hours) * Decimal(str(uptime_percent)) / Decimal(100)) \
        .to_integral_value(rounding=ROUND_FLOOR)
    return max(int(hours), 0)


def partition_by_price(
    series: Sequence[PricePoint],
    shutdown_hours: int
) -> Tuple[List[PricePoint], List[PricePoint]]:
    """
    Split a series into the ``shutdown_hours`` most expensive hours and the rest.

    Returns:
        Tuple of (shutdown set ordered by price descending, keep-running set
        in original order)
    """
    ranked = sorted(range(len(series)), key=lambda i: series[i].price, reverse=True)
    selected = ranked[:shutdown_hours]
    selected_set = set(selected)

    shutdown = [series[i] for i in selected]
    keep_running = [series[i] for i in range(len(series)) if i not in selected_set]
    return shutdown, keep_running


def price_distribution(series: Sequence[PricePoint]) -> List[PriceBucket]:
    """Histogram of hourly prices over fixed dollar buckets."""
    total = len(series)
    buckets = []
    for label, lower, upper in DISTRIBUTION_BUCKETS:
        hours = sum(
            1 for point in series
            if (lower is None or point.price >= lower) and (upper is None or point.price < upper)
        )
        buckets.append(PriceBucket(
            range=label,
            min_price=lower,
            max_price=upper,
            hours=hours,
            percentage=round(hours / total * 100, 2) if total else 0.0
        ))
    return buckets


def _mean(prices: Sequence[float]) -> float:
    return math.fsum(prices) / len(prices)


def _check_improvement(
    original_average: float,
    optimized_average: float,
    shutdown: Sequence[PricePoint],
    keep_running: Sequence[PricePoint],
    config: AnalysisConfig,
    context: dict
) -> None:
    """Reject a run whose optimized average is not below the original average."""
    tolerance = config.invariant_tolerance * max(1.0, abs(original_average))
    margin = original_average - optimized_average

    if margin > tolerance:
        return
    if config.allow_flat_market and abs(margin) <= tolerance:
        logger.info(
            f"Flat market: optimized average {optimized_average:.4f} equals original "
            f"{original_average:.4f}, accepted by configuration")
        return

    top_shutdown = sorted((p.price for p in shutdown), reverse=True)[:5]
    bottom_running = sorted(p.price for p in keep_running)[:5]
    logger.error(
        f"❌ Optimized average {optimized_average:.4f} is not below original "
        f"{original_average:.4f}; top shutdown prices {top_shutdown}, "
        f"bottom running prices {bottom_running}")

    raise ComputationInvariantError(
        "Optimized average price is not below the original average; no result produced",
        context={
            **context,
            "original_average": original_average,
            "optimized_average": optimized_average,
            "top_shutdown_prices": top_shutdown,
            "bottom_running_prices": bottom_running
        }
    )


def build_result(
    strategy: str,
    series: Sequence[PricePoint],
    shutdown: Sequence[PricePoint],
    keep_running: Sequence[PricePoint],
    transmission_adder: float,
    allowed_hours: int,
    target_uptime_percent: Optional[float] = None,
    strike_price: Optional[float] = None
) -> AnalysisResult:
    """Assemble an AnalysisResult where every curtailed hour is a 1h event."""
    original_average = _mean([p.price for p in series])
    new_average = _mean([p.price for p in keep_running]) if keep_running else original_average

    events = [
        ShutdownEvent(
            date=point.date,
            start_hour=point.hour,
            datetime=point.datetime,
            duration_hours=1,
            price=point.price,
            peak_price=point.price,
            baseline_price=new_average,
            energy_savings=point.price,
            all_in_savings=point.price + transmission_adder
        )
        for point in sorted(shutdown, key=lambda p: p.datetime)
    ]

    total_savings = math.fsum(event.energy_savings for event in events)
    total_all_in_savings = math.fsum(event.all_in_savings for event in events)

    return AnalysisResult(
        strategy=strategy,
        target_uptime_percent=target_uptime_percent,
        strike_price=strike_price,
        total_hours=len(series),
        allowed_downtime_hours=allowed_hours,
        total_shutdown_hours=len(events),
        downtime_percentage=len(events) / len(series) * 100,
        total_savings=total_savings,
        total_all_in_savings=total_all_in_savings,
        average_savings=total_savings / len(events) if events else 0.0,
        original_average=original_average,
        new_average_price=new_average,
        original_all_in_average=original_average + transmission_adder,
        new_all_in_average=new_average + transmission_adder,
        transmission_adder=transmission_adder,
        period_start=min(p.datetime for p in series),
        period_end=max(p.datetime for p in series),
        uses_synthetic_data=any(p.is_synthetic for p in series),
        events=events,
        price_distribution=price_distribution(series)
    )


def optimize_uptime(
    series: Sequence[PricePoint],
    target_uptime_percent: Any,
    config: Optional[AnalysisConfig] = None
) -> AnalysisResult:
    """
    Curtail the most expensive hours allowed by an uptime target.

    Args:
        series: Hourly prices for exactly the analysis window
        target_uptime_percent: Required uptime, 50-100
        config: Per-call analysis configuration

    Returns:
        AnalysisResult: Shutdown hours, savings and averages

    Raises:
        InvalidParameterError: If the target is not a number or out of range
        InsufficientDataError: If the series is empty
        ComputationInvariantError: If the optimized average is not lower than
        the original (for example a perfectly flat market)
    """
    config = config or AnalysisConfig()
    target = validate_uptime_target(target_uptime_percent)

    if not series:
        raise InsufficientDataError(
            "No price series available, no optimization possible",
            context={"target_uptime_percent": target})

    total_hours = len(series)
    allowed = 0 if target >= MAX_UPTIME_PERCENT else allowed_downtime_hours(total_hours, target)
    context = {
        "target_uptime_percent": target,
        "series_length": total_hours,
        "allowed_downtime_hours": allowed
    }

    logger.info(
        f"Optimizing {total_hours}h for {target}% uptime ({allowed}h downtime budget)")

    if allowed == 0:
        return build_result(
            "deterministic", series, [], list(series),
            config.transmission_adder, 0, target_uptime_percent=target)

    shutdown, keep_running = partition_by_price(series, allowed)
    original_average = _mean([p.price for p in series])
    optimized_average = _mean([p.price for p in keep_running])
    _check_improvement(
        original_average, optimized_average, shutdown, keep_running, config, context)

    result = build_result(
        "deterministic", series, shutdown, keep_running,
        config.transmission_adder, allowed, target_uptime_percent=target)

    logger.info(
        f"✅ {result.total_shutdown_hours}h curtailed, average {result.original_average:.2f} -> "
        f"{result.new_average_price:.2f} $/MWh, savings {result.total_savings:.2f}")
    return result
