"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import pytest
import requests

from curtailment.config import CurrencyConfig
from curtailment.models import PricePoint
from curtailment.repositories import PriceSource
from curtailment.services import CurrencyService

START = datetime(2024, 1, 1)  # a Monday, ISO week 2024-W01


def build_series(prices: Sequence[float], start: datetime = START) -> List[PricePoint]:
    """Consecutive hourly PricePoints starting at ``start``."""
    points = []
    for i, price in enumerate(prices):
        ts = start + timedelta(hours=i)
        points.append(PricePoint(date=ts.date(), hour=ts.hour, datetime=ts, price=float(price)))
    return points


def series_frame(series: Sequence[PricePoint]) -> pd.DataFrame:
    """Repository-shaped DataFrame for a series."""
    return pd.DataFrame({
        "datetime": [p.datetime.strftime("%Y-%m-%d %H:%M:%S") for p in series],
        "date": [p.date.isoformat() for p in series],
        "hour": [p.hour for p in series],
        "price": [p.price for p in series],
    })


class FakePriceRepository(PriceSource):
    """In-memory price source."""

    def __init__(self, hourly: Optional[pd.DataFrame] = None,
                 daily: Optional[pd.DataFrame] = None, error: Exception = None):
        self.hourly = hourly if hourly is not None else pd.DataFrame(
            columns=["datetime", "date", "hour", "price"])
        self.daily = daily if daily is not None else pd.DataFrame(
            columns=["date", "average_price"])
        self.error = error

    def find_hourly_prices(self, start=None, end=None) -> pd.DataFrame:
        if self.error:
            raise self.error
        df = self.hourly
        if df.empty:
            return df
        ts = pd.to_datetime(df["datetime"])
        mask = pd.Series(True, index=df.index)
        if start is not None:
            mask &= ts >= pd.Timestamp(start)
        if end is not None:
            mask &= ts <= pd.Timestamp(end)
        return df.loc[mask].reset_index(drop=True)

    def find_daily_averages(self, start_date=None, end_date=None) -> pd.DataFrame:
        if self.error:
            raise self.error
        df = self.daily
        if df.empty:
            return df
        dates = pd.to_datetime(df["date"])
        mask = pd.Series(True, index=df.index)
        if start_date is not None:
            mask &= dates >= pd.Timestamp(start_date)
        if end_date is not None:
            mask &= dates <= pd.Timestamp(end_date)
        return df.loc[mask].reset_index(drop=True)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.payload


class FakeSession:
    """Stands in for requests.Session and counts calls."""

    def __init__(self, payload=None, error: Exception = None, status_code=200):
        self.payload = payload
        self.error = error
        self.status_code = status_code
        self.calls = 0

    def get(self, url, timeout=None):
        self.calls += 1
        if self.error:
            raise self.error
        return FakeResponse(self.payload, self.status_code)


# ==================== FIXTURES ====================

@pytest.fixture
def make_series():
    """Factory for consecutive hourly series."""
    return build_series


@pytest.fixture
def ramp_series():
    """One day priced 10, 20, ..., 240 $/MWh."""
    return build_series([10 * (i + 1) for i in range(24)])


@pytest.fixture
def flat_series():
    """100 hours at a constant 50 $/MWh."""
    return build_series([50.0] * 100)


@pytest.fixture
def volatile_series():
    """Two weeks of distinct prices with a daily shape, noise and spikes."""
    rng = np.random.default_rng(42)
    hours = np.arange(14 * 24)
    prices = 60 + 25 * np.sin(2 * np.pi * (hours % 24 - 6) / 24) + rng.normal(0, 8, hours.size)
    spikes = rng.choice(hours.size, size=12, replace=False)
    prices[spikes] += rng.uniform(150, 600, size=12)
    return build_series(prices)


@pytest.fixture
def fallback_currency():
    """Currency service whose rate lookup always fails."""
    return CurrencyService(
        config=CurrencyConfig(fallback_rate=0.73),
        session=FakeSession(error=requests.ConnectionError("offline"))
    )
