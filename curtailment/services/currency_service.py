"""
Service for CAD to USD conversion of analysis totals.
"""

import logging
from typing import Optional

import requests

from .base_service import BaseService
from ..config import CurrencyConfig, app_config
from ..exceptions import ExternalDependencyError, InvalidParameterError
from ..models import CurrencyQuote
from ..utils.cache_utils import ttl_cache

logger = logging.getLogger(__name__)


class CurrencyService(BaseService):
    """
    Exchange rate lookup with a fallback constant.

    A failed lookup never fails an analysis; the configured fallback rate is
    used instead and the quote is marked ``is_fallback``.
    """

    def __init__(self, config: Optional[CurrencyConfig] = None,
                 session: Optional[requests.Session] = None):
        super().__init__()
        self.config = config or app_config.currency
        self.session = session or requests.Session()

    def validate_input(self, **kwargs) -> bool:
        """Validate an amount to convert."""
        amount = kwargs.get("amount")
        if amount is not None and not isinstance(amount, (int, float)):
            raise InvalidParameterError(
                "Amount must be a number", reason="not_a_number", context={"amount": amount})
        return True

    def fetch_rate(self) -> float:
        """
        Fetch the live exchange rate.

        Raises:
            ExternalDependencyError: If the rate service cannot be reached or
            returns an unusable payload
        """
        try:
            response = self.session.get(
                self.config.exchange_rate_url, timeout=self.config.request_timeout_seconds)
            response.raise_for_status()
            rate = response.json()["rates"][self.config.target_currency]
            return float(rate)
        except requests.RequestException as e:
            raise ExternalDependencyError(
                "Exchange rate service unavailable",
                context={"url": self.config.exchange_rate_url, "error": str(e)}
            ) from e
        except (KeyError, TypeError, ValueError) as e:
            raise ExternalDependencyError(
                "Exchange rate service returned an unexpected payload",
                context={"url": self.config.exchange_rate_url, "error": str(e)}
            ) from e

    @ttl_cache(ttl_seconds=app_config.currency.cache_ttl_seconds)
    def get_quote(self) -> CurrencyQuote:
        """Get the current rate, falling back to the configured constant."""
        try:
            rate = self.fetch_rate()
            is_fallback = False
        except ExternalDependencyError as e:
            logger.warning(
                f"⚠️  {e.message}, using fallback rate {self.config.fallback_rate}")
            rate = self.config.fallback_rate
            is_fallback = True

        return CurrencyQuote(
            base_currency=self.config.base_currency,
            target_currency=self.config.target_currency,
            rate=rate,
            is_fallback=is_fallback
        )

    def convert(self, amount: float, quote: Optional[CurrencyQuote] = None) -> float:
        """Convert an amount from the base to the target currency."""
        self.validate_input(amount=amount)
        quote = quote or self.get_quote()
        return round(amount * quote.rate, 2)
