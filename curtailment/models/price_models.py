"""
Domain models for hourly pool price data and derived baselines.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PricePoint(BaseModel):
    """Model for a single hourly price observation."""
    model_config = ConfigDict(frozen=True)

    date: date
    hour: int = Field(ge=0, le=23)
    datetime: datetime
    price: float  # $/MWh, zero and negative prices are legal
    is_synthetic: bool = False  # generated from a daily average


class BaselineWindow(BaseModel):
    """Rolling reference price ending just before ``datetime``."""
    model_config = ConfigDict(frozen=True)

    datetime: datetime
    average: float
    volatility: float  # population standard deviation of the window
    confidence: float  # clamped to [0.6, 0.95]


class BaselineSeries(BaseModel):
    """Rolling baseline windows plus a summary over all of them."""
    window_hours: int
    windows: List[BaselineWindow]
    average: float
    volatility: float
    confidence: float
    overall_average: float  # plain mean of the whole series
    # True when the series was shorter than one window and the overall
    # average of the series stands in as the baseline
    is_fallback: bool = False

    @property
    def relative_volatility(self) -> float:
        """Volatility as a fraction of the average price."""
        if self.average == 0:
            return 0.0
        return self.volatility / abs(self.average)


class PriceBucket(BaseModel):
    """Histogram bucket of hourly prices."""
    range: str
    min_price: Optional[float] = None  # inclusive, None for open lower bound
    max_price: Optional[float] = None  # exclusive, None for open upper bound
    hours: int
    percentage: float


class PriceStatistics(BaseModel):
    """Headline statistics of a price series."""
    average: float
    peak: float
    low: float
    volatility_percent: float  # std / mean * 100
    trend: str  # "up", "down" or "stable"
    data_points: int


class HourlyPattern(BaseModel):
    """Average price for one hour of the day."""
    hour: int
    average_price: float
    occurrences: int


class PeakHour(BaseModel):
    """One of the most expensive hours in a series."""
    datetime: datetime
    date: date
    hour: int
    price: float


class PriceSpikes(BaseModel):
    """Hours priced more than two standard deviations above the mean."""
    threshold: float
    count: int
    description: str


class SeasonalPattern(BaseModel):
    """Seasonal averages including the 95% uptime operating price."""
    season: str
    average: float
    peak: float
    uptime95_price: float
    data_points: int


class YearlyUptimeSummary(BaseModel):
    """Per-year price statistics after curtailing the most expensive hours."""
    year: int
    uptime_percentage: float
    average: Optional[float] = None
    peak: Optional[float] = None
    low: Optional[float] = None
    volatility: Optional[float] = None
    data_points: int
    filtered_data_points: int


class MarketStatistics(BaseModel):
    """Model for the complete market statistics response."""
    statistics: PriceStatistics
    hourly_pattern: List[HourlyPattern]
    peak_hours: List[PeakHour]
    spikes: PriceSpikes
    seasonal_patterns: List[SeasonalPattern]
    distribution: List[PriceBucket]
