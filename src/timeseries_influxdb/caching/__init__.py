"""
Caching Layer.

Provides caching infrastructure for the metric catalog:
    - CacheManager: TTL-based caching with LRU eviction
    - CacheConfig: Configuration for cache behavior
    - CacheStats: Statistics tracking for cache operations
    - SingleFlight: At most one in-flight load per key
"""

from timeseries_influxdb.caching.cache_manager import (
    CacheConfig,
    CacheEntry,
    CacheManager,
    CacheManagerProtocol,
    CacheStats,
)
from timeseries_influxdb.caching.single_flight import SingleFlight

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheManager",
    "CacheManagerProtocol",
    "CacheStats",
    "SingleFlight",
]
