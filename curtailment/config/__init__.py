"""
Configuration package for application settings.
"""

from .settings import (
    ApplicationConfig,
    APIConfig,
    DatabaseConfig,
    CurrencyConfig,
    AnalysisConfig,
    OperationalConstraints,
    app_config
)
from .database import DatabaseManager, db_manager

__all__ = [
    "ApplicationConfig",
    "APIConfig",
    "DatabaseConfig",
    "CurrencyConfig",
    "AnalysisConfig",
    "OperationalConstraints",
    "app_config",
    "DatabaseManager",
    "db_manager"
]
