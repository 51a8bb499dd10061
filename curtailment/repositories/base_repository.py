"""
Base repository interfaces for price data access.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import pandas as pd


class BaseRepository(ABC):
    """Abstract base repository interface."""

    @abstractmethod
    def find_all(self) -> pd.DataFrame:
        """Find all records."""
        pass

    @abstractmethod
    def find_by_id(self, record_id: Any) -> Optional[pd.Series]:
        """Find record by ID."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count total records."""
        pass


class PriceSource(ABC):
    """
    Source of historical prices consumed by the curtailment services.

    Implementations return DataFrames; an unreachable source raises
    ExternalDependencyError.
    """

    @abstractmethod
    def find_hourly_prices(self, start: Any = None, end: Any = None) -> pd.DataFrame:
        """Hourly observations (datetime, date, hour, price) in ``[start, end]``."""
        pass

    @abstractmethod
    def find_daily_averages(self, start_date: Any = None, end_date: Any = None) -> pd.DataFrame:
        """Daily averages (date, average_price) in ``[start_date, end_date]``."""
        pass
