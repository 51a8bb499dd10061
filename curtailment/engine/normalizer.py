"""
Price series normalization.

Turns raw hourly observations (a DataFrame from the price store, a list of
dictionaries from an API payload, or already-built PricePoint objects) into
a clean, chronologically ordered list of PricePoint objects restricted to a
requested window.

Missing prices are excluded, never coerced to zero, so they cannot drag an
average down through its denominator.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple, Union

import pandas as pd
import pytz
from pydantic import BaseModel

from ..exceptions import InsufficientDataError, InvalidParameterError
from ..models import PricePoint

logger = logging.getLogger(__name__)

PriceRecords = Union[pd.DataFrame, Iterable[Any]]


def window_for_days(
    days: int,
    now: Optional[datetime] = None,
    timezone: str = "America/Edmonton"
) -> Tuple[datetime, datetime]:
    """
    Get the inclusive ``[now - days, now]`` analysis window.

    Args:
        days: Number of days to look back (at least 1)
        now: Reference time; defaults to the current wall clock in ``timezone``
        timezone: Market timezone used when ``now`` is not supplied

    Returns:
        Tuple[datetime, datetime]: Naive (wall clock) start and end
    """
    if days is None or days < 1:
        raise InvalidParameterError(
            "Days must be at least 1",
            reason="too_low",
            context={"days": days}
        )

    if now is None:
        now = datetime.now(pytz.timezone(timezone)).replace(tzinfo=None)
    elif now.tzinfo is not None:
        now = now.replace(tzinfo=None)

    return now - timedelta(days=days), now


def _to_frame(records: PriceRecords) -> pd.DataFrame:
    """Build a DataFrame from any supported record container."""
    if isinstance(records, pd.DataFrame):
        return records.copy()

    rows = []
    for record in records:
        if isinstance(record, BaseModel):
            rows.append(record.model_dump())
        else:
            rows.append(dict(record))
    return pd.DataFrame(rows)


def _as_wall_clock(value: Any) -> pd.Timestamp:
    """Drop timezone information while keeping the local wall clock time."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def normalize_price_series(
    records: PriceRecords,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[PricePoint]:
    """
    Validate and clean hourly price observations for a date range.

    Each record needs a ``price`` plus either a ``datetime`` or a ``date``
    and ``hour``. Rows with missing prices or timestamps are dropped, rows
    with an hour outside 0-23 are rejected, duplicate timestamps keep the
    last observation and the result is sorted chronologically.

    Args:
        records: DataFrame or iterable of mappings / PricePoint objects
        start: Inclusive lower bound of the window (optional)
        end: Inclusive upper bound of the window (optional)

    Returns:
        List[PricePoint]: Ordered, de-duplicated observations

    Raises:
        InvalidParameterError: If the records lack a price or time column
        InsufficientDataError: If no observation survives cleaning
    """
    df = _to_frame(records)
    context = {
        "records": len(df),
        "start": str(start) if start else None,
        "end": str(end) if end else None
    }

    if df.empty:
        raise InsufficientDataError("No price observations supplied", context=context)

    if "price" not in df.columns:
        raise InvalidParameterError(
            "Price observations must include a 'price' field",
            context={**context, "columns": list(df.columns)}
        )

    if "datetime" not in df.columns or df["datetime"].isna().all():
        if "date" not in df.columns or "hour" not in df.columns:
            raise InvalidParameterError(
                "Price observations need a 'datetime' or a 'date' and 'hour'",
                context={**context, "columns": list(df.columns)}
            )
        hours = pd.to_numeric(df["hour"], errors="coerce")
        df["datetime"] = pd.to_datetime(df["date"], errors="coerce") + \
            pd.to_timedelta(hours, unit="h")

    df["datetime"] = pd.to_datetime(df["datetime"], errors="coerce")
    if getattr(df["datetime"].dt, "tz", None) is not None:
        df["datetime"] = df["datetime"].dt.tz_localize(None)
    df["price"] = pd.to_numeric(df["price"], errors="coerce")

    missing = df["price"].isna() | df["datetime"].isna()
    if missing.any():
        logger.info(f"Excluding {int(missing.sum())} observations without a price or timestamp")
    df = df.loc[~missing]

    if "hour" in df.columns:
        supplied_hours = pd.to_numeric(df["hour"], errors="coerce")
        invalid = ~supplied_hours.between(0, 23)
        if invalid.any():
            logger.warning(
                f"⚠️  Rejecting {int(invalid.sum())} observations with an hour outside 0-23")
            df = df.loc[~invalid]

    if "is_synthetic" in df.columns:
        df["is_synthetic"] = df["is_synthetic"].eq(True)
    else:
        df["is_synthetic"] = False

    df = df.drop_duplicates(subset="datetime", keep="last")
    df = df.sort_values("datetime", kind="mergesort")

    if start is not None:
        df = df.loc[df["datetime"] >= _as_wall_clock(start)]
    if end is not None:
        df = df.loc[df["datetime"] <= _as_wall_clock(end)]

    if df.empty:
        raise InsufficientDataError(
            "No price data available for the requested window", context=context)

    return [
        PricePoint(
            date=ts.date(),
            hour=ts.hour,
            datetime=ts.to_pydatetime(),
            price=float(price),
            is_synthetic=bool(synthetic)
        )
        for ts, price, synthetic in zip(df["datetime"], df["price"], df["is_synthetic"])
    ]
