"""
Descriptive market statistics over an hourly price series.

Headline statistics, hour-of-day pattern, the most expensive hours, price
spikes, seasonal patterns and per-year uptime summaries. All figures are
rounded to two decimals.
"""

import logging
import math
from typing import List, Sequence

import numpy as np
import pandas as pd

from ..exceptions import InsufficientDataError
from ..models import (
    HourlyPattern,
    MarketStatistics,
    PeakHour,
    PricePoint,
    PriceSpikes,
    PriceStatistics,
    SeasonalPattern,
    YearlyUptimeSummary
)
from .uptime_optimizer import kept_hours, price_distribution, validate_uptime_target

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 0.05
PEAK_HOUR_COUNT = 10
SPIKE_SIGMAS = 2

SEASONS = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "fall", 10: "fall", 11: "fall",
}
SEASON_ORDER = ["winter", "spring", "summer", "fall"]


def _frame(series: Sequence[PricePoint]) -> pd.DataFrame:
    if not series:
        raise InsufficientDataError("No price series available for market statistics")
    return pd.DataFrame({
        "datetime": [p.datetime for p in series],
        "date": [p.date for p in series],
        "hour": [p.hour for p in series],
        "price": [p.price for p in series],
    })


def relative_volatility(prices: Sequence[float]) -> float:
    """Population standard deviation as a percentage of the mean."""
    values = np.asarray(prices, dtype=float)
    mean = values.mean()
    if mean == 0:
        return 0.0
    return float(values.std() / mean * 100)


def price_trend(prices: Sequence[float]) -> str:
    """Compare the first and last quarter of a series: up, down or stable."""
    quarter = len(prices) // 4
    if len(prices) < 2 or quarter == 0:
        return "stable"

    first = math.fsum(prices[:quarter]) / quarter
    last = math.fsum(prices[-quarter:]) / quarter
    if first == 0:
        return "stable"

    change = (last - first) / first
    if change > TREND_THRESHOLD:
        return "up"
    if change < -TREND_THRESHOLD:
        return "down"
    return "stable"


def price_statistics(series: Sequence[PricePoint]) -> PriceStatistics:
    prices = [p.price for p in series]
    if not prices:
        raise InsufficientDataError("No price series available for statistics")
    return PriceStatistics(
        average=round(math.fsum(prices) / len(prices), 2),
        peak=round(max(prices), 2),
        low=round(min(prices), 2),
        volatility_percent=round(relative_volatility(prices), 2),
        trend=price_trend(prices),
        data_points=len(prices)
    )


def hourly_pattern(series: Sequence[PricePoint]) -> List[HourlyPattern]:
    """Average price per hour of day."""
    grouped = _frame(series).groupby("hour")["price"].agg(["mean", "count"])
    return [
        HourlyPattern(hour=int(hour), average_price=round(float(row["mean"]), 2),
                      occurrences=int(row["count"]))
        for hour, row in grouped.iterrows()
    ]


def peak_hours(series: Sequence[PricePoint], count: int = PEAK_HOUR_COUNT) -> List[PeakHour]:
    """The ``count`` most expensive hours, highest first."""
    ranked = sorted(series, key=lambda p: p.price, reverse=True)[:count]
    return [
        PeakHour(datetime=p.datetime, date=p.date, hour=p.hour, price=round(p.price, 2))
        for p in ranked
    ]


def detect_spikes(series: Sequence[PricePoint]) -> PriceSpikes:
    """Count hours priced more than two standard deviations above the mean."""
    prices = np.array([p.price for p in series], dtype=float)
    if prices.size == 0:
        raise InsufficientDataError("No price series available for spike detection")

    threshold = float(prices.mean() + SPIKE_SIGMAS * prices.std())
    count = int((prices > threshold).sum())
    return PriceSpikes(
        threshold=round(threshold, 2),
        count=count,
        description=f"{count} hours above ${threshold:.2f}/MWh "
                    f"(mean + {SPIKE_SIGMAS} standard deviations)"
    )


def seasonal_patterns(series: Sequence[PricePoint]) -> List[SeasonalPattern]:
    """Per season average, peak and the average after removing the top 5% of hours."""
    df = _frame(series)
    df["season"] = pd.to_datetime(df["datetime"]).dt.month.map(SEASONS)

    patterns = []
    for season in SEASON_ORDER:
        prices = df.loc[df["season"] == season, "price"].sort_values(ascending=False)
        if prices.empty:
            continue
        remove = int(math.floor(len(prices) * 0.05))
        kept = prices.iloc[remove:]
        average = float(prices.mean())
        patterns.append(SeasonalPattern(
            season=season,
            average=round(average, 2),
            peak=round(float(prices.max()), 2),
            uptime95_price=round(float(kept.mean()), 2) if not kept.empty else round(average, 2),
            data_points=int(len(prices))
        ))
    return patterns


def yearly_uptime_summary(
    series: Sequence[PricePoint],
    uptime_percentage: float = 100.0
) -> List[YearlyUptimeSummary]:
    """
    Per calendar year, keep the cheapest ``floor(n * uptime / 100)`` hours and
    summarize them.

    Years without any kept hour are reported with empty statistics.
    """
    uptime = validate_uptime_target(uptime_percentage)
    df = _frame(series)
    df["year"] = pd.to_datetime(df["datetime"]).dt.year

    summaries = []
    for year, group in df.groupby("year"):
        prices = group["price"].sort_values(kind="mergesort")
        keep = kept_hours(len(prices), uptime)
        kept = prices.iloc[:keep]

        if kept.empty:
            summaries.append(YearlyUptimeSummary(
                year=int(year), uptime_percentage=uptime,
                data_points=int(len(prices)), filtered_data_points=0))
            continue

        summaries.append(YearlyUptimeSummary(
            year=int(year),
            uptime_percentage=uptime,
            average=round(float(kept.mean()), 2),
            peak=round(float(kept.max()), 2),
            low=round(float(kept.min()), 2),
            volatility=round(float(kept.std(ddof=0)), 2),
            data_points=int(len(prices)),
            filtered_data_points=int(len(kept))
        ))
    return summaries


def market_statistics(series: Sequence[PricePoint]) -> MarketStatistics:
    """Build the complete market statistics report."""
    logger.info(f"Computing market statistics over {len(series)} hours")
    return MarketStatistics(
        statistics=price_statistics(series),
        hourly_pattern=hourly_pattern(series),
        peak_hours=peak_hours(series),
        spikes=detect_spikes(series),
        seasonal_patterns=seasonal_patterns(series),
        distribution=price_distribution(series)
    )
