"""
Rolling baseline estimation.

For every hour with a full window of history behind it, the baseline is the
mean and population standard deviation of the preceding ``window_days * 24``
prices. A confidence level is derived from how noisy that window is:

    confidence = clamp(1 - volatility / |average|, 0.6, 0.95)
"""

import logging
import math
from bisect import bisect_left
from datetime import datetime, timedelta
from typing import Sequence

import numpy as np
import pandas as pd

from ..exceptions import InsufficientDataError, InvalidParameterError
from ..models import BaselineSeries, BaselineWindow, PricePoint

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.6
MAX_CONFIDENCE = 0.95
ZERO_AVERAGE_EPSILON = 1e-12


def confidence_from(average: float, volatility: float) -> float:
    """Derive a clamped confidence level from a window's average and volatility."""
    if abs(average) < ZERO_AVERAGE_EPSILON:
        return MIN_CONFIDENCE
    return float(np.clip(1.0 - volatility / abs(average), MIN_CONFIDENCE, MAX_CONFIDENCE))


def compute_rolling_baseline(
    series: Sequence[PricePoint],
    window_days: int = 30
) -> BaselineSeries:
    """
    Compute a rolling baseline over an ordered hourly series.

    Args:
        series: Chronologically ordered hourly prices
        window_days: Window length in days

    Returns:
        BaselineSeries: Per-hour windows and their averaged summary. When the
        series is not longer than one window there are no windows and the
        overall average of the series is used instead (``is_fallback``).
    """
    if window_days is None or window_days < 1:
        raise InvalidParameterError(
            "Baseline window must be at least one day",
            reason="too_low",
            context={"window_days": window_days}
        )
    if not series:
        raise InsufficientDataError(
            "Cannot compute a baseline for an empty series",
            context={"window_days": window_days}
        )

    window_hours = window_days * 24
    prices = pd.Series([point.price for point in series], dtype=float)
    overall_average = math.fsum(prices) / len(prices)

    if len(prices) <= window_hours:
        volatility = float(prices.std(ddof=0))
        if abs(overall_average) < ZERO_AVERAGE_EPSILON:
            volatility = 0.0
        logger.info(
            f"Series of {len(prices)}h is shorter than the {window_hours}h baseline window, "
            f"using the overall average {overall_average:.2f} as baseline")
        return BaselineSeries(
            window_hours=window_hours,
            windows=[],
            average=overall_average,
            volatility=volatility,
            confidence=confidence_from(overall_average, volatility),
            overall_average=overall_average,
            is_fallback=True
        )

    # Shift so the value at i describes the window [i - window_hours, i)
    rolling = prices.rolling(window=window_hours)
    means = rolling.mean().shift(1)
    stds = rolling.std(ddof=0).shift(1)

    windows = []
    for i in range(window_hours, len(prices)):
        average = float(means.iat[i])
        volatility = max(float(stds.iat[i]), 0.0)
        if abs(average) < ZERO_AVERAGE_EPSILON:
            volatility = 0.0
        windows.append(BaselineWindow(
            datetime=series[i].datetime,
            average=average,
            volatility=volatility,
            confidence=confidence_from(average, volatility)
        ))

    return BaselineSeries(
        window_hours=window_hours,
        windows=windows,
        average=float(np.mean([w.average for w in windows])),
        volatility=float(np.mean([w.volatility for w in windows])),
        confidence=float(np.mean([w.confidence for w in windows])),
        overall_average=overall_average,
        is_fallback=False
    )


class BaselineLookup:
    """Nearest-window baseline lookup with a fallback to the series average."""

    def __init__(self, baseline: BaselineSeries, tolerance: timedelta = timedelta(hours=1)):
        self.tolerance = tolerance
        self.fallback = baseline.overall_average
        self._times = [window.datetime for window in baseline.windows]
        self._averages = [window.average for window in baseline.windows]

    def price_at(self, when: datetime) -> float:
        """Get the baseline of the nearest window within tolerance of ``when``."""
        if not self._times:
            return self.fallback

        idx = bisect_left(self._times, when)
        candidates = [j for j in (idx - 1, idx) if 0 <= j < len(self._times)]
        nearest = min(candidates, key=lambda j: abs(self._times[j] - when))

        if abs(self._times[nearest] - when) <= self.tolerance:
            return self._averages[nearest]
        return self.fallback
