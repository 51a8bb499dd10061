"""
Price Data Repository Tests

Runs the SQLite repository against a temporary database file.
"""

from datetime import date, datetime

import pytest

from conftest import build_series
from curtailment.config import DatabaseManager
from curtailment.exceptions import ExternalDependencyError
from curtailment.repositories import PriceDataRepository


# ==================== FIXTURES ====================

@pytest.fixture
def database(tmp_path):
    manager = DatabaseManager(str(tmp_path / "db" / "prices.db"))
    manager.initialize_schema()
    return manager


@pytest.fixture
def repository(database):
    repository = PriceDataRepository(database)
    repository.save_hourly_prices(build_series([float(i) for i in range(48)]))
    repository.save_daily_averages([
        {"date": "2024-01-01", "average_price": 11.5},
        {"date": date(2024, 1, 2), "average_price": 35.5},
        {"date": "2024-01-03", "average_price": None},
    ])
    return repository


# ==================== TESTS ====================

class TestPriceDataRepository:

    def test_count_and_find_all(self, repository):
        assert repository.count() == 48
        df = repository.find_all()
        assert list(df.columns) == ["datetime", "date", "hour", "price"]
        assert df["datetime"].iloc[0] == "2024-01-01 00:00:00"

    def test_find_by_id(self, repository):
        row = repository.find_by_id(datetime(2024, 1, 1, 5))

        assert row["price"] == 5.0
        assert repository.find_by_id(datetime(2030, 1, 1)) is None

    def test_hourly_window_is_inclusive(self, repository):
        df = repository.find_hourly_prices(datetime(2024, 1, 1, 10), datetime(2024, 1, 2, 10))

        assert len(df) == 25
        assert df["price"].tolist() == [float(i) for i in range(10, 35)]

    def test_replace_existing_hour(self, repository):
        repository.save_hourly_prices([{"datetime": "2024-01-01 05:00", "price": 99.0}])

        assert repository.count() == 48
        assert repository.find_by_id("2024-01-01 05:00:00")["price"] == 99.0

    def test_missing_price_is_stored_as_null(self, database):
        repository = PriceDataRepository(database)
        repository.save_hourly_prices([{"datetime": "2024-02-01 00:00", "price": None}])

        assert repository.find_hourly_prices()["price"].isna().all()

    def test_daily_averages(self, repository):
        df = repository.find_daily_averages(date(2024, 1, 2), "2024-01-03")

        assert df["date"].tolist() == ["2024-01-02", "2024-01-03"]
        assert df["average_price"].iloc[0] == 35.5
        assert df["average_price"].isna().iloc[1]

    def test_missing_schema_is_dependency_error(self, tmp_path):
        repository = PriceDataRepository(DatabaseManager(str(tmp_path / "empty.db")))

        with pytest.raises(ExternalDependencyError):
            repository.find_hourly_prices()
        with pytest.raises(ExternalDependencyError):
            repository.count()
