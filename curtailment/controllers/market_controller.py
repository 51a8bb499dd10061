"""
Controller for market statistics endpoints.
"""

from fastapi import Depends, HTTPException, Query

from .base_controller import BaseController
from ..models import MarketStatistics, YearlyUptimeResponse
from ..repositories import PriceDataRepository
from ..services import MarketService


def get_market_service() -> MarketService:
    """Dependency injection for MarketService."""
    repository = PriceDataRepository()
    return MarketService(repository)


class MarketController(BaseController):
    """Controller for market statistics endpoints."""

    def _setup_routes(self):
        """Setup routes for market statistics."""

        @self.router.get("/market/statistics", response_model=MarketStatistics,
                         tags=["Market Statistics"])
        async def get_market_statistics(
            days: int = Query(30, description="Number of days to analyze"),
            service: MarketService = Depends(get_market_service)
        ):
            """Get price statistics, hourly pattern, peaks, spikes and seasons."""
            try:
                return service.get_market_statistics(days=days)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error retrieving market statistics")

        @self.router.get("/market/yearly-uptime", response_model=YearlyUptimeResponse,
                         tags=["Market Statistics"])
        async def get_yearly_uptime(
            uptime_percentage: str = Query(
                "95", description="Uptime percentage applied to every year (50-100)"),
            years: int = Query(8, description="Number of years to summarize"),
            service: MarketService = Depends(get_market_service)
        ):
            """Per-year price statistics after curtailing the most expensive hours."""
            try:
                return service.get_yearly_uptime(
                    uptime_percentage=uptime_percentage, years=years)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error retrieving yearly uptime summary")
