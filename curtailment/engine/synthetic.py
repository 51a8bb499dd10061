"""
Synthetic hourly expansion of daily average prices.

When the price source only has daily (or period) averages, each day is
expanded into 24 hourly prices by applying a fixed diurnal shape:

- Overnight valley (00-06h): 0.78 - 0.90
- Morning shoulder (07-09h): 1.05 - 1.10
- Late morning dip (10-11h): 0.88 - 0.92
- Afternoon build (12-16h): 1.10 - 1.25
- Evening peak (17h): 1.40, tapering to 0.88 at 23h

The curve averages to exactly 1.0, so the mean of a generated day equals the
average it was generated from.
"""

import logging
import math
from datetime import datetime, time
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from ..exceptions import InvalidParameterError
from ..models import PricePoint

logger = logging.getLogger(__name__)

HOURLY_MULTIPLIERS = (
    0.82, 0.80, 0.78, 0.78, 0.80, 0.84,  # 00-05
    0.90, 1.05, 1.10, 1.05, 0.88, 0.92,  # 06-11
    1.10, 1.10, 1.10, 1.15, 1.25, 1.40,  # 12-17
    1.30, 1.15, 1.03, 0.92, 0.90, 0.88,  # 18-23
)


def multiplier_for_hour(hour: int) -> float:
    """Get the diurnal multiplier for an hour of the day."""
    if hour < 0 or hour > 23:
        raise InvalidParameterError(
            "Hour must be between 0 and 23", context={"hour": hour})
    return HOURLY_MULTIPLIERS[hour]


def _record_value(record: Any, *keys: str) -> Any:
    """Read the first present key from a mapping or attribute container."""
    for key in keys:
        if isinstance(record, Mapping):
            if key in record:
                return record[key]
        elif hasattr(record, key):
            return getattr(record, key)
    return None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def expand_daily_averages(
    daily_records: Iterable[Any],
    period_average: Optional[float] = None
) -> List[PricePoint]:
    """
    Expand daily records into 24 synthetic hourly prices per day.

    Each record needs a ``date``; a record-level ``price`` (or
    ``average_price``) is used as that day's average when present, otherwise
    ``period_average`` applies.

    Args:
        daily_records: Iterable of mappings or objects with a ``date``
        period_average: Average applied to days without their own average

    Returns:
        List[PricePoint]: Synthetic hourly points, 24 per day, chronological
    """
    points = []
    days = 0

    for record in daily_records:
        raw_date = _record_value(record, "date")
        if raw_date is None:
            raise InvalidParameterError(
                "Daily records must include a 'date'", context={"record": str(record)})
        day = pd.Timestamp(raw_date).date()

        average = _record_value(record, "price", "average_price")
        if _is_missing(average):
            average = period_average
        if _is_missing(average):
            raise InvalidParameterError(
                "No daily or period average available for synthetic expansion",
                context={"date": str(day)}
            )
        average = float(average)

        for hour, multiplier in enumerate(HOURLY_MULTIPLIERS):
            points.append(PricePoint(
                date=day,
                hour=hour,
                datetime=datetime.combine(day, time(hour=hour)),
                price=average * multiplier,
                is_synthetic=True
            ))
        days += 1

    logger.info(f"Expanded {days} daily averages into {len(points)} synthetic hourly prices")
    return sorted(points, key=lambda point: point.datetime)
