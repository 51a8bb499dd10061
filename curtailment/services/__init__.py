"""
Services package for business logic layer.
Imports all services for easy access.
"""

# Base service
from .base_service import BaseService

# Individual services
from .currency_service import CurrencyService
from .curtailment_service import CurtailmentService
from .market_service import MarketService

__all__ = [
    # Base service
    "BaseService",

    # Individual services
    "CurrencyService",
    "CurtailmentService",
    "MarketService"
]
