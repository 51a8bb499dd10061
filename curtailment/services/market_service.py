"""
Service for market statistics.
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException

from .base_service import BaseService
from ..config import ApplicationConfig, app_config
from ..engine import (
    market_statistics,
    normalize_price_series,
    window_for_days,
    yearly_uptime_summary
)
from ..exceptions import InvalidParameterError
from ..models import MarketStatistics, YearlyUptimeResponse
from ..repositories import PriceDataRepository, PriceSource


class MarketService(BaseService):
    """Service for descriptive market statistics."""

    def __init__(self, repository: PriceSource = None, config: ApplicationConfig = None):
        """Initialize service with repository dependency injection."""
        super().__init__(repository or PriceDataRepository())
        self.config = config or app_config

    def validate_input(self, **kwargs) -> bool:
        """Validate input parameters for statistics queries."""
        days = kwargs.get('days')
        years = kwargs.get('years')

        if days is not None and (days < 1 or days > 3650):
            raise InvalidParameterError(
                "Days must be between 1 and 3650",
                reason="too_low" if days < 1 else "too_high",
                context={"days": days})

        if years is not None and (years < 1 or years > 20):
            raise InvalidParameterError(
                "Years must be between 1 and 20",
                reason="too_low" if years < 1 else "too_high",
                context={"years": years})

        return True

    def get_market_statistics(
        self,
        days: int = 30,
        now: Optional[datetime] = None
    ) -> MarketStatistics:
        """Get headline statistics and patterns for the last ``days`` days."""
        try:
            self.validate_input(days=days)
            start, end = window_for_days(days, now, self.config.timezone)
            records = self.repository.find_hourly_prices(start, end)
            return market_statistics(normalize_price_series(records, start, end))

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error retrieving market statistics")

    def get_yearly_uptime(
        self,
        uptime_percentage: float = 95.0,
        years: int = 8,
        now: Optional[datetime] = None
    ) -> YearlyUptimeResponse:
        """Per-year statistics after curtailing the most expensive hours."""
        try:
            self.validate_input(years=years)
            start, end = window_for_days(years * 365, now, self.config.timezone)
            records = self.repository.find_hourly_prices(start, end)
            summaries = yearly_uptime_summary(
                normalize_price_series(records, start, end), uptime_percentage)

            return YearlyUptimeResponse(
                uptime_percentage=summaries[0].uptime_percentage,
                years=summaries,
                total_years=len(summaries),
                years_with_data=sum(1 for s in summaries if s.filtered_data_points > 0)
            )

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error retrieving yearly uptime summary")
