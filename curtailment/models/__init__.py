"""
Models package for API data structures.
Imports all models for easy access.
"""

# Price models
from .price_models import (
    PricePoint,
    BaselineWindow,
    BaselineSeries,
    PriceBucket,
    PriceStatistics,
    HourlyPattern,
    PeakHour,
    PriceSpikes,
    SeasonalPattern,
    YearlyUptimeSummary,
    MarketStatistics
)

# Analysis models
from .analysis_models import (
    ShutdownEvent,
    MonteCarloSummary,
    CostRiskResult,
    ScheduleResult,
    AnalysisResult,
    ScenarioResult,
    ThresholdSweepRow,
    PriceInput,
    AnalysisRequest
)

# Response models
from .response_models import (
    CurrencyQuote,
    AnalysisResponse,
    ScenarioComparisonResponse,
    ThresholdSweepResponse,
    YearlyUptimeResponse,
    APIInfo,
    HealthResponse
)

__all__ = [
    # Price models
    "PricePoint",
    "BaselineWindow",
    "BaselineSeries",
    "PriceBucket",
    "PriceStatistics",
    "HourlyPattern",
    "PeakHour",
    "PriceSpikes",
    "SeasonalPattern",
    "YearlyUptimeSummary",
    "MarketStatistics",

    # Analysis models
    "ShutdownEvent",
    "MonteCarloSummary",
    "CostRiskResult",
    "ScheduleResult",
    "AnalysisResult",
    "ScenarioResult",
    "ThresholdSweepRow",
    "PriceInput",
    "AnalysisRequest",

    # Response models
    "CurrencyQuote",
    "AnalysisResponse",
    "ScenarioComparisonResponse",
    "ThresholdSweepResponse",
    "YearlyUptimeResponse",
    "APIInfo",
    "HealthResponse"
]
