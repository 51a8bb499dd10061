"""
Repository package for data access layer.
"""

from .base_repository import BaseRepository, PriceSource
from .price_data_repository import PriceDataRepository

__all__ = [
    "BaseRepository",
    "PriceSource",
    "PriceDataRepository"
]
