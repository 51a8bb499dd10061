"""
Controller for curtailment analysis endpoints.
"""

from typing import List, Optional

from fastapi import Depends, HTTPException, Query

from .base_controller import BaseController
from ..models import (
    AnalysisRequest,
    AnalysisResponse,
    ScenarioComparisonResponse,
    ThresholdSweepResponse
)
from ..repositories import PriceDataRepository
from ..services import CurrencyService, CurtailmentService

# Shared so the exchange rate cache survives across requests
currency_service = CurrencyService()


def get_curtailment_service() -> CurtailmentService:
    """Dependency injection for CurtailmentService."""
    repository = PriceDataRepository()
    return CurtailmentService(repository, currency_service)


class CurtailmentController(BaseController):
    """Controller for curtailment analysis endpoints."""

    def _setup_routes(self):
        """Setup routes for curtailment analyses."""

        @self.router.get("/curtailment/uptime", response_model=AnalysisResponse,
                         tags=["Curtailment Analysis"])
        async def analyze_uptime(
            days: int = Query(30, description="Number of days to analyze"),
            target_uptime_percent: str = Query(
                "95", description="Required uptime percentage (50-100)"),
            strategy: str = Query(
                "deterministic", description="deterministic or constrained"),
            transmission_adder: Optional[float] = Query(
                None, description="Transmission adder in $/MWh"),
            seed: Optional[int] = Query(
                None, description="Monte Carlo seed for reproducible risk figures"),
            service: CurtailmentService = Depends(get_curtailment_service)
        ):
            """Select the hours to curtail for an uptime target and report savings."""
            try:
                return service.analyze_uptime(
                    days=days,
                    target_uptime_percent=target_uptime_percent,
                    strategy=strategy,
                    transmission_adder=transmission_adder,
                    monte_carlo_seed=seed
                )
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error running uptime analysis")

        @self.router.get("/curtailment/scenarios", response_model=ScenarioComparisonResponse,
                         tags=["Curtailment Analysis"])
        async def compare_scenarios(
            days: int = Query(30, description="Number of days to analyze"),
            targets: Optional[List[float]] = Query(
                None, description="Uptime targets, defaults to 100/97/96/95/90/85/80"),
            transmission_adder: Optional[float] = Query(
                None, description="Transmission adder in $/MWh"),
            service: CurtailmentService = Depends(get_curtailment_service)
        ):
            """Compare the optimization across several uptime targets."""
            try:
                return service.compare_scenarios(
                    days=days, targets=targets, transmission_adder=transmission_adder)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error comparing uptime scenarios")

        @self.router.get("/curtailment/strike-price", response_model=AnalysisResponse,
                         tags=["Curtailment Analysis"])
        async def analyze_strike_price(
            days: int = Query(30, description="Number of days to analyze"),
            strike_price: str = Query(
                "100", description="Curtail every hour at or above this $/MWh price"),
            transmission_adder: Optional[float] = Query(
                None, description="Transmission adder in $/MWh"),
            service: CurtailmentService = Depends(get_curtailment_service)
        ):
            """Curtail every hour priced at or above a strike price."""
            try:
                return service.analyze_strike_price(
                    days=days, strike_price=strike_price,
                    transmission_adder=transmission_adder)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error running strike price analysis")

        @self.router.get("/curtailment/threshold-sweep", response_model=ThresholdSweepResponse,
                         tags=["Curtailment Analysis"])
        async def threshold_sweep(
            days: int = Query(30, description="Number of days to analyze"),
            thresholds: Optional[List[float]] = Query(
                None, description="Strike prices to evaluate"),
            service: CurtailmentService = Depends(get_curtailment_service)
        ):
            """Operating hours and average cost when running only below each strike."""
            try:
                return service.threshold_sweep(days=days, thresholds=thresholds)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error running threshold sweep")

        @self.router.post("/curtailment/analyze", response_model=AnalysisResponse,
                          tags=["Curtailment Analysis"])
        async def analyze_series(
            request: AnalysisRequest,
            service: CurtailmentService = Depends(get_curtailment_service)
        ):
            """Analyze a caller-supplied hourly price series."""
            try:
                return service.analyze_series(request)
            except HTTPException:
                raise
            except Exception as e:
                self.handle_exception(e, "Error analyzing supplied prices")
