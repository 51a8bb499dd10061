"""
Utility helpers shared by the services.
"""

from .cache_utils import ttl_cache

__all__ = ["ttl_cache"]
