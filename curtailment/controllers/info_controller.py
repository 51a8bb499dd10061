"""
Controller for API information and health endpoints.
"""

from .base_controller import BaseController
from ..config import app_config
from ..models import APIInfo, HealthResponse


class InfoController(BaseController):
    """Controller for API information and health endpoints."""

    def _setup_routes(self):
        """Setup routes for API info and health."""

        @self.router.get("/", response_model=APIInfo, tags=["System Information"])
        async def get_api_info():
            """API root endpoint with basic information."""
            return APIInfo(
                message=app_config.api.title,
                version=app_config.api.version,
                endpoints={
                    "uptime": "/curtailment/uptime - Optimize curtailment for an uptime target",
                    "scenarios": "/curtailment/scenarios - Compare several uptime targets",
                    "strike_price": "/curtailment/strike-price - Curtail above a strike price",
                    "threshold_sweep": "/curtailment/threshold-sweep - Operating profile per strike price",
                    "analyze": "/curtailment/analyze - Analyze a supplied price series (POST)",
                    "market_statistics": "/market/statistics - Price statistics and patterns",
                    "yearly_uptime": "/market/yearly-uptime - Per-year uptime summary",
                    "health": "/health - Health check"
                }
            )

        @self.router.get("/health", response_model=HealthResponse, tags=["System Information"])
        async def health_check():
            """Health check endpoint."""
            return HealthResponse(
                status="healthy",
                service="curtailment-optimizer-api"
            )
