"""
Strike price analysis: curtail every hour priced at or above a fixed strike.
"""

import logging
import math
from typing import Any, List, Optional, Sequence

from ..config import AnalysisConfig
from ..exceptions import InsufficientDataError, InvalidParameterError
from ..models import AnalysisResult, PricePoint, ThresholdSweepRow
from .uptime_optimizer import build_result

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_THRESHOLDS = [20, 40, 60, 80, 100, 120, 150, 200, 300, 500]


def _validate_strike(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(
            f"Strike price must be a number, got {value!r}",
            reason="not_a_number", context={"strike_price": value})
    try:
        strike = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(
            f"Strike price must be a number, got {value!r}",
            reason="not_a_number", context={"strike_price": value})
    if math.isnan(strike) or math.isinf(strike):
        raise InvalidParameterError(
            f"Strike price must be a finite number, got {value!r}",
            reason="not_a_number", context={"strike_price": value})
    return strike


def analyze_strike_price(
    series: Sequence[PricePoint],
    strike_price: Any,
    config: Optional[AnalysisConfig] = None
) -> AnalysisResult:
    """
    Curtail all hours priced at or above ``strike_price``.

    The achieved uptime is reported as ``target_uptime_percent``.
    """
    config = config or AnalysisConfig()
    strike = _validate_strike(strike_price)

    if not series:
        raise InsufficientDataError(
            "No price series available, no strike price analysis possible",
            context={"strike_price": strike})

    shutdown = [point for point in series if point.price >= strike]
    keep_running = [point for point in series if point.price < strike]
    uptime = round(len(keep_running) / len(series) * 100, 2)

    logger.info(
        f"Strike {strike:.2f} $/MWh curtails {len(shutdown)} of {len(series)}h "
        f"({uptime}% uptime)")

    return build_result(
        "strike_price", series, shutdown, keep_running,
        config.transmission_adder, len(shutdown),
        target_uptime_percent=uptime, strike_price=strike)


def threshold_sweep(
    series: Sequence[PricePoint],
    thresholds: Optional[Sequence[float]] = None
) -> List[ThresholdSweepRow]:
    """
    Operating profile when running only in hours below each strike price.

    Returns:
        List[ThresholdSweepRow]: Hours operating, share of time operating and
        average energy cost of the operating hours, per threshold
    """
    if not series:
        raise InsufficientDataError("No price series available for a threshold sweep")

    thresholds = [_validate_strike(t) for t in (thresholds or DEFAULT_SWEEP_THRESHOLDS)]
    rows = []
    for threshold in thresholds:
        operating = [point.price for point in series if point.price < threshold]
        rows.append(ThresholdSweepRow(
            threshold=threshold,
            operating_hours=len(operating),
            percent_time_operating=round(len(operating) / len(series) * 100, 2),
            average_operating_cost=round(math.fsum(operating) / len(operating), 2)
            if operating else 0.0
        ))
    return rows
