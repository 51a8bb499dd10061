"""
Repository for historical pool price data.
Supplies hourly observations and daily averages for a date range.
"""

import logging
import sqlite3
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

import pandas as pd

from .base_repository import BaseRepository, PriceSource
from ..config import DatabaseManager, db_manager
from ..exceptions import ExternalDependencyError

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def _date_param(value: Optional[DateLike]) -> Optional[str]:
    """Format a bound for the TEXT date columns."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class PriceDataRepository(BaseRepository, PriceSource):
    """Repository for hourly and daily pool prices."""

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.db_manager = database or db_manager

    def _query(self, query: str, params: Optional[list] = None) -> pd.DataFrame:
        try:
            return self.db_manager.execute_query(query, params)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            logger.error(f"❌ Price store query failed: {e}")
            raise ExternalDependencyError(
                "Historical price source is unavailable",
                context={"database": self.db_manager.database_path, "error": str(e)}
            ) from e

    def find_all(self) -> pd.DataFrame:
        """Find all hourly price records."""
        return self._query(
            "SELECT datetime, date, hour, price FROM pool_prices ORDER BY datetime")

    def find_by_id(self, record_id: Any) -> Optional[pd.Series]:
        """Find an hourly price record by its datetime."""
        df = self._query(
            "SELECT datetime, date, hour, price FROM pool_prices WHERE datetime = ?",
            [_date_param(record_id)]
        )
        return df.iloc[0] if not df.empty else None

    def count(self) -> int:
        """Count hourly price records."""
        try:
            return int(self.db_manager.execute_scalar("SELECT COUNT(*) FROM pool_prices") or 0)
        except sqlite3.Error as e:
            raise ExternalDependencyError(
                "Historical price source is unavailable",
                context={"database": self.db_manager.database_path, "error": str(e)}
            ) from e

    def find_hourly_prices(
        self,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None
    ) -> pd.DataFrame:
        """
        Find hourly prices with ``start <= datetime <= end``.

        Returns:
            DataFrame with datetime, date, hour and price columns, oldest first
        """
        query = "SELECT datetime, date, hour, price FROM pool_prices WHERE 1=1"
        params = []

        if start is not None:
            query += " AND datetime >= ?"
            params.append(_date_param(start))
        if end is not None:
            query += " AND datetime <= ?"
            params.append(_date_param(end))

        query += " ORDER BY datetime ASC"
        df = self._query(query, params)
        logger.debug(f"Loaded {len(df)} hourly prices between {start} and {end}")
        return df

    def find_daily_averages(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None
    ) -> pd.DataFrame:
        """
        Find daily average prices with ``start_date <= date <= end_date``.

        Returns:
            DataFrame with date and average_price columns, oldest first
        """
        query = "SELECT date, average_price FROM daily_prices WHERE 1=1"
        params = []

        if start_date is not None:
            query += " AND date >= ?"
            params.append(pd.Timestamp(start_date).date().isoformat())
        if end_date is not None:
            query += " AND date <= ?"
            params.append(pd.Timestamp(end_date).date().isoformat())

        query += " ORDER BY date ASC"
        return self._query(query, params)

    def save_hourly_prices(self, records: Iterable[Any]) -> int:
        """
        Insert or replace hourly prices.

        Args:
            records: PricePoint objects or mappings with datetime and price

        Returns:
            Number of rows written
        """
        rows = []
        for record in records:
            data = record.model_dump() if hasattr(record, "model_dump") else dict(record)
            ts = pd.Timestamp(data["datetime"])
            rows.append((
                ts.strftime("%Y-%m-%d %H:%M:%S"),
                ts.date().isoformat(),
                ts.hour,
                data.get("price")
            ))

        try:
            self.db_manager.execute_many(
                "INSERT OR REPLACE INTO pool_prices (datetime, date, hour, price) "
                "VALUES (?, ?, ?, ?)",
                rows
            )
        except sqlite3.Error as e:
            raise ExternalDependencyError(
                "Failed to store hourly prices",
                context={"rows": len(rows), "error": str(e)}
            ) from e
        logger.info(f"Stored {len(rows)} hourly prices")
        return len(rows)

    def save_daily_averages(self, records: Iterable[Any]) -> int:
        """Insert or replace daily average prices (mappings with date and average_price)."""
        rows = [
            (pd.Timestamp(record["date"]).date().isoformat(), record.get("average_price"))
            for record in records
        ]
        try:
            self.db_manager.execute_many(
                "INSERT OR REPLACE INTO daily_prices (date, average_price) VALUES (?, ?)",
                rows
            )
        except sqlite3.Error as e:
            raise ExternalDependencyError(
                "Failed to store daily averages",
                context={"rows": len(rows), "error": str(e)}
            ) from e
        logger.info(f"Stored {len(rows)} daily averages")
        return len(rows)
