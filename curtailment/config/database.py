"""
Database Configuration and Management Module

This module provides centralized SQLite access for the historical pool price
store that feeds the curtailment engine. The store is an external
collaborator: the engine only needs hourly observations for a date range,
and this manager is the thin adapter that supplies them.

Features:
    - Single database manager shared by all repositories
    - Automatic connection cleanup
    - Parameter binding for every query
    - Pandas DataFrame integration for downstream analysis

Usage:
    ```python
    from curtailment.config import db_manager

    df = db_manager.execute_query(
        "SELECT * FROM pool_prices WHERE date >= ?", ["2024-01-01"]
    )
    total = db_manager.execute_scalar("SELECT COUNT(*) FROM pool_prices")
    ```

Database Schema:
    - Table: pool_prices (hourly), columns datetime, date, hour, price
    - Table: daily_prices (daily averages), columns date, average_price
    - Indexes: pool_prices ON date for range queries
"""

import os
import sqlite3
from typing import Any, List, Optional, Union

import pandas as pd

from .settings import app_config

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS pool_prices (
        datetime TEXT PRIMARY KEY,
        date TEXT NOT NULL,
        hour INTEGER NOT NULL CHECK (hour BETWEEN 0 AND 23),
        price REAL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_pool_prices_date ON pool_prices (date)",
    """
    CREATE TABLE IF NOT EXISTS daily_prices (
        date TEXT PRIMARY KEY,
        average_price REAL
    )
    """,
]


class DatabaseManager:
    """
    Centralized database connection and query management for pool price data.

    Examples:
        >>> db = DatabaseManager("/tmp/prices.db")
        >>> db.initialize_schema()
        >>> df = db.execute_query("SELECT * FROM pool_prices LIMIT 5")
        >>> count = db.execute_scalar("SELECT COUNT(*) FROM pool_prices")
    """

    def __init__(self, database_path: Optional[str] = None):
        """
        Initialize the DatabaseManager.

        Args:
            database_path: Optional explicit path; defaults to the configured path.
        """
        self.database_path = database_path or app_config.database_path
        self.timeout = app_config.database.connection_timeout

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a database connection with row factory enabled.

        The connection should be closed after use. The execute_* helpers
        handle cleanup automatically.
        """
        conn = sqlite3.connect(self.database_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        return conn

    def initialize_schema(self) -> None:
        """Create the price tables and indexes if they do not exist."""
        db_dir = os.path.dirname(self.database_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

        conn = self.get_connection()
        try:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
            conn.commit()
        finally:
            conn.close()

    def execute_query(self, query: str, params: Optional[List[Any]] = None) -> pd.DataFrame:
        """
        Execute a SELECT query and return results as a pandas DataFrame.

        Args:
            query: SQL SELECT query with ? placeholders.
            params: Parameters bound to the placeholders.

        Raises:
            sqlite3.Error: If the query execution fails.
        """
        conn = self.get_connection()
        try:
            if params is None:
                params = []
            return pd.read_sql_query(query, conn, params=params)
        finally:
            conn.close()

    def execute_many(self, query: str, rows: List[tuple]) -> int:
        """Execute a parameterized INSERT/UPDATE for many rows in one transaction."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(query, rows)
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def execute_scalar(self, query: str, params: Optional[List[Any]] = None) -> Union[Any, None]:
        """
        Execute a query and return a single scalar value, or None if no row.

        Raises:
            sqlite3.Error: If the query execution fails.
        """
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            if params is None:
                params = []
            cursor.execute(query, params)
            result = cursor.fetchone()
            return result[0] if result else None
        finally:
            conn.close()


# Shared instance for use throughout the application
db_manager = DatabaseManager()
