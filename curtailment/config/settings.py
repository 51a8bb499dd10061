"""
Application configuration settings.
Spring Boot-like configuration management with environment overrides.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Load environment variables from .env file next to the package, then the cwd
load_dotenv(Path(__file__).parent.parent / '.env')
load_dotenv()


class DatabaseConfig(BaseModel):
    """Database configuration settings."""

    database_path: str = os.getenv(
        "CURTAILMENT_DB_PATH", "db/electricity_prices.db")  # Relative to package directory
    connection_timeout: int = 30


class APIConfig(BaseModel):
    """API configuration settings."""

    title: str = "Load Curtailment Optimization API"
    description: str = "REST API for selecting curtailment hours against historical pool prices and quantifying the resulting savings"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: str = os.getenv("CURTAILMENT_LOG_LEVEL", "INFO")

    # CORS settings
    allow_origins: list = ["*"]
    allow_credentials: bool = True
    allow_methods: list = ["*"]
    allow_headers: list = ["*"]


class CurrencyConfig(BaseModel):
    """Currency conversion collaborator settings."""

    base_currency: str = "CAD"
    target_currency: str = "USD"
    exchange_rate_url: str = os.getenv(
        "CURTAILMENT_EXCHANGE_RATE_URL", "https://api.exchangerate-api.com/v4/latest/CAD")
    fallback_rate: float = float(
        os.getenv("CURTAILMENT_FALLBACK_EXCHANGE_RATE", "0.73"))
    request_timeout_seconds: float = 10.0
    cache_ttl_seconds: int = 600


class OperationalConstraints(BaseModel):
    """Physical and commercial limits on how the load may be cycled."""

    model_config = ConfigDict(frozen=True)

    startup_cost_per_mw: float = Field(50.0, ge=0)
    shutdown_cost_per_mw: float = Field(25.0, ge=0)
    minimum_shutdown_duration_hours: int = Field(2, ge=1)
    maximum_shutdowns_per_week: int = Field(10, ge=1)
    ramping_time_minutes: int = Field(15, ge=0)


class AnalysisConfig(BaseModel):
    """
    Per-call analysis configuration.

    A fresh copy is passed into every engine call; nothing in the engine
    reads process-wide state.
    """

    model_config = ConfigDict(frozen=True)

    transmission_adder: float = float(
        os.getenv("CURTAILMENT_TRANSMISSION_ADDER", "11.63"))  # $/MWh
    baseline_window_days: int = Field(30, ge=1)
    monte_carlo_iterations: int = Field(1000, ge=1)
    monte_carlo_seed: Optional[int] = None
    scenario_targets: List[float] = [100, 97, 96, 95, 90, 85, 80]
    scenario_workers: int = Field(1, ge=1)

    # Optimized average must be below the original by more than this
    invariant_tolerance: float = 1e-9
    # Accept optimized == original (flat markets) instead of rejecting the run
    allow_flat_market: bool = False

    # Dynamic transmission bands ($/MWh)
    high_price_threshold: float = 150.0
    medium_price_threshold: float = 75.0
    low_price_threshold: float = 25.0
    high_price_multiplier: float = 1.3
    medium_price_multiplier: float = 1.15
    low_price_multiplier: float = 0.8

    constraints: OperationalConstraints = OperationalConstraints()


class ApplicationConfig:
    """Main application configuration."""

    def __init__(self):
        self.database = DatabaseConfig()
        self.api = APIConfig()
        self.currency = CurrencyConfig()
        self.analysis = AnalysisConfig()
        self.timezone = os.getenv("CURTAILMENT_TIMEZONE", "America/Edmonton")

    @property
    def database_path(self) -> str:
        """Get database path."""
        if os.path.isabs(self.database.database_path):
            return self.database.database_path
        # Relative paths resolve against the package directory
        config_dir = os.path.dirname(os.path.abspath(__file__))
        package_dir = os.path.dirname(config_dir)
        return os.path.join(package_dir, self.database.database_path)

    @property
    def is_debug(self) -> bool:
        """Check if debug mode is enabled."""
        return self.api.debug


# Global configuration instance
app_config = ApplicationConfig()
