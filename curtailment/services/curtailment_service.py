"""
Service for curtailment analysis operations.

Loads the price window from the price source, runs the optimization engine
with a per-request configuration and attaches currency context to the
result.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd
from fastapi import HTTPException

from .base_service import BaseService
from .currency_service import CurrencyService
from ..config import AnalysisConfig, ApplicationConfig, app_config
from ..engine import (
    analyze_strike_price,
    expand_daily_averages,
    normalize_price_series,
    run_scenarios,
    run_strategy,
    threshold_sweep,
    validate_uptime_target,
    window_for_days
)
from ..exceptions import InsufficientDataError, InvalidParameterError
from ..models import (
    AnalysisRequest,
    AnalysisResponse,
    AnalysisResult,
    PricePoint,
    ScenarioComparisonResponse,
    ThresholdSweepResponse
)
from ..repositories import PriceDataRepository, PriceSource

logger = logging.getLogger(__name__)

MAX_DAYS = 3650


class CurtailmentService(BaseService):
    """Service for uptime, scenario and strike price analyses."""

    def __init__(
        self,
        repository: PriceSource = None,
        currency_service: CurrencyService = None,
        config: ApplicationConfig = None
    ):
        """Initialize service with repository dependency injection."""
        super().__init__(repository or PriceDataRepository())
        self.currency_service = currency_service or CurrencyService()
        self.config = config or app_config

    def validate_input(self, **kwargs) -> bool:
        """Validate input parameters for curtailment analyses."""
        days = kwargs.get('days')
        target = kwargs.get('target_uptime_percent')
        transmission_adder = kwargs.get('transmission_adder')

        if days is not None and (days < 1 or days > MAX_DAYS):
            raise InvalidParameterError(
                f"Days must be between 1 and {MAX_DAYS}",
                reason="too_low" if days < 1 else "too_high",
                context={"days": days}
            )

        if target is not None:
            validate_uptime_target(target)

        if transmission_adder is not None and transmission_adder < 0:
            raise InvalidParameterError(
                "Transmission adder cannot be negative",
                reason="too_low",
                context={"transmission_adder": transmission_adder}
            )

        return True

    def _analysis_config(
        self,
        transmission_adder: Optional[float] = None,
        monte_carlo_seed: Optional[int] = None
    ) -> AnalysisConfig:
        """Per-request copy of the default analysis configuration."""
        overrides = {}
        if transmission_adder is not None:
            overrides["transmission_adder"] = transmission_adder
        if monte_carlo_seed is not None:
            overrides["monte_carlo_seed"] = monte_carlo_seed
        return self.config.analysis.model_copy(update=overrides)

    def _fetch_records(
        self,
        days: int,
        now: Optional[datetime] = None
    ) -> Tuple[Any, Optional[datetime], Optional[datetime]]:
        """
        Get raw records for the last ``days`` days and the window to apply.

        Falls back to synthetic hourly prices expanded from daily averages
        when the window holds no hourly observations. Synthetic records are
        already restricted to whole days, so no window is returned for them.
        """
        start, end = window_for_days(days, now, self.config.timezone)
        hourly = self.repository.find_hourly_prices(start, end)
        if not hourly.empty and hourly["price"].notna().any():
            return hourly, start, end

        daily = self.repository.find_daily_averages(start.date(), end.date())
        if daily.empty or daily["average_price"].isna().all():
            raise InsufficientDataError(
                "No price data available for the requested window",
                context={"days": days, "start": str(start), "end": str(end)}
            )

        logger.warning(
            f"⚠️  No hourly prices between {start:%Y-%m-%d} and {end:%Y-%m-%d}, "
            f"expanding {len(daily)} daily averages into synthetic hours")
        period_average = float(daily["average_price"].mean())
        synthetic = expand_daily_averages(daily.to_dict("records"), period_average)
        return synthetic, None, None

    def load_series(self, days: int, now: Optional[datetime] = None) -> List[PricePoint]:
        """Get the normalized hourly series for the last ``days`` days."""
        records, start, end = self._fetch_records(days, now)
        return normalize_price_series(records, start, end)

    def _with_currency(self, result: AnalysisResult) -> AnalysisResponse:
        quote = self.currency_service.get_quote()
        return AnalysisResponse(
            analysis=result,
            currency=quote,
            total_savings_converted=self.currency_service.convert(result.total_savings, quote),
            total_all_in_savings_converted=self.currency_service.convert(
                result.total_all_in_savings, quote)
        )

    def analyze_uptime(
        self,
        days: int = 30,
        target_uptime_percent: float = 95.0,
        strategy: str = "deterministic",
        transmission_adder: Optional[float] = None,
        monte_carlo_seed: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> AnalysisResponse:
        """Run an uptime optimization over the last ``days`` days."""
        try:
            self.validate_input(days=days, target_uptime_percent=target_uptime_percent,
                                transmission_adder=transmission_adder)
            config = self._analysis_config(transmission_adder, monte_carlo_seed)
            series = self.load_series(days, now)
            result = run_strategy(strategy, series, target_uptime_percent, config)
            return self._with_currency(result)

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error running uptime analysis")

    def compare_scenarios(
        self,
        days: int = 30,
        targets: Optional[Sequence[float]] = None,
        transmission_adder: Optional[float] = None,
        now: Optional[datetime] = None
    ) -> ScenarioComparisonResponse:
        """Run the uptime optimization for several targets side by side."""
        try:
            self.validate_input(days=days, transmission_adder=transmission_adder)
            config = self._analysis_config(transmission_adder)
            records, start, end = self._fetch_records(days, now)
            scenarios = run_scenarios(records, targets, config, start, end)
            return ScenarioComparisonResponse(
                days=days,
                scenarios=scenarios,
                currency=self.currency_service.get_quote()
            )

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error comparing uptime scenarios")

    def analyze_strike_price(
        self,
        days: int = 30,
        strike_price: float = 100.0,
        transmission_adder: Optional[float] = None,
        now: Optional[datetime] = None
    ) -> AnalysisResponse:
        """Curtail every hour at or above a strike price."""
        try:
            self.validate_input(days=days, transmission_adder=transmission_adder)
            config = self._analysis_config(transmission_adder)
            series = self.load_series(days, now)
            return self._with_currency(analyze_strike_price(series, strike_price, config))

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error running strike price analysis")

    def threshold_sweep(
        self,
        days: int = 30,
        thresholds: Optional[Sequence[float]] = None,
        now: Optional[datetime] = None
    ) -> ThresholdSweepResponse:
        """Operating hours and cost for a list of strike prices."""
        try:
            self.validate_input(days=days)
            series = self.load_series(days, now)
            return ThresholdSweepResponse(
                days=days,
                total_hours=len(series),
                sweep=threshold_sweep(series, thresholds)
            )

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error running threshold sweep")

    def analyze_series(self, request: AnalysisRequest) -> AnalysisResponse:
        """Run a strategy over a caller-supplied price series."""
        try:
            self.validate_input(target_uptime_percent=request.target_uptime_percent,
                                transmission_adder=request.transmission_adder)
            config = self._analysis_config(request.transmission_adder, request.monte_carlo_seed)
            records = pd.DataFrame([p.model_dump() for p in request.prices])
            series = normalize_price_series(records, request.start, request.end)
            result = run_strategy(
                request.strategy, series, request.target_uptime_percent, config)
            return self._with_currency(result)

        except HTTPException:
            raise
        except Exception as e:
            self.handle_exception(e, "Error analyzing supplied prices")
