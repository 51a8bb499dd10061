"""
Response models for API endpoints.
"""

from pydantic import BaseModel
from typing import List

from .analysis_models import AnalysisResult, ScenarioResult, ThresholdSweepRow
from .price_models import YearlyUptimeSummary


class CurrencyQuote(BaseModel):
    """Exchange rate used to present results in a second currency."""
    base_currency: str
    target_currency: str
    rate: float
    is_fallback: bool


class AnalysisResponse(BaseModel):
    """Model for a single analysis with currency context."""
    analysis: AnalysisResult
    currency: CurrencyQuote
    total_savings_converted: float
    total_all_in_savings_converted: float


class ScenarioComparisonResponse(BaseModel):
    """Model for the multi-target uptime comparison."""
    days: int
    scenarios: List[ScenarioResult]
    currency: CurrencyQuote


class ThresholdSweepResponse(BaseModel):
    """Model for the strike price sweep."""
    days: int
    total_hours: int
    sweep: List[ThresholdSweepRow]


class YearlyUptimeResponse(BaseModel):
    """Model for the per-year uptime summary."""
    uptime_percentage: float
    years: List[YearlyUptimeSummary]
    total_years: int
    years_with_data: int


class APIInfo(BaseModel):
    """Model for API information."""
    message: str
    version: str
    endpoints: dict


class HealthResponse(BaseModel):
    """Model for health check response."""
    status: str
    service: str
