"""
Controllers package for API endpoint handlers.
Imports all controllers for easy access.
"""

from fastapi import APIRouter

# Base controller
from .base_controller import BaseController

# Individual controllers
from .info_controller import InfoController
from .curtailment_controller import CurtailmentController, get_curtailment_service
from .market_controller import MarketController, get_market_service


class ApiController:
    """Aggregate controller that includes every controller router."""

    def __init__(self):
        """Initialize aggregate controller with all sub-controllers."""
        self.router = APIRouter()

        self.info_controller = InfoController()
        self.curtailment_controller = CurtailmentController()
        self.market_controller = MarketController()

        self._setup_aggregate_routes()

    def _setup_aggregate_routes(self):
        """Include all individual controller routes."""
        self.router.include_router(self.info_controller.router)
        self.router.include_router(self.curtailment_controller.router)
        self.router.include_router(self.market_controller.router)


# Create aggregate controller
api_controller = ApiController()

__all__ = [
    # Base controller
    "BaseController",

    # Individual controllers
    "InfoController",
    "CurtailmentController",
    "MarketController",

    # Dependency injection
    "get_curtailment_service",
    "get_market_service",

    # Aggregate controller
    "ApiController",
    "api_controller"
]
