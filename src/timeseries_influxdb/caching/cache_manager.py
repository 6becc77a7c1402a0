"""
Cache Manager - TTL-based Caching with LRU Eviction.

Provides thread-safe caching for expensive backend scans.

Design Notes:
    - TTL-based expiration, measured from when a value was stored
    - LRU eviction when max entry count exceeded
    - Thread-safe with Lock
    - Injected clock so expiry is testable without sleeping
    - get_or_load() deduplicates concurrent loads via SingleFlight
    - A failed load stores nothing; expired values are never served
    - invalidate() and clear() bump a per-key generation; a load started
      under an older generation hands its value to its waiters but does
      not store it, and later callers start a fresh load
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from timeseries_influxdb.caching.single_flight import SingleFlight

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]

_MISSING = object()


@runtime_checkable
class CacheManagerProtocol(Protocol):
    """Protocol for cache manager implementations."""

    def get(self, key: Hashable) -> Optional[Any]:
        """Get a live value from cache, or None."""
        ...

    def load(
        self,
        key: Hashable,
        loader: Callable[[], T],
        ttl_seconds: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> T:
        """Load key once for all concurrent callers and cache the result."""
        ...

    def invalidate(self, key: Hashable) -> bool:
        """Invalidate a cache entry and any load in flight for it."""
        ...


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""

    value: Any
    created_at: float
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at the given clock reading."""
        if self.expires_at is None:
            return False
        return now >= self.expires_at


@dataclass
class CacheConfig:
    """Configuration for cache manager."""

    # Maximum number of entries before LRU eviction
    max_entries: int = 1000

    # Default TTL in seconds, <= 0 means no expiry
    default_ttl_seconds: float = 60.0

    # Log cache hits/misses
    log_access: bool = False


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    loads: int = 0
    load_failures: int = 0
    evictions: int = 0
    expirations: int = 0
    current_entries: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class CacheManager:
    """
    TTL-based cache with LRU eviction policy and single-flight loading.

    Features:
        - Thread-safe
        - Configurable max entry count
        - TTL-based expiration against an injectable clock
        - At most one load in flight per key and generation
        - Statistics tracking
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Clock = time.monotonic,
        single_flight: Optional[SingleFlight] = None,
    ) -> None:
        """
        Initialize cache manager.

        Args:
            config: Cache configuration
            clock: Returns the current time in seconds
            single_flight: Load deduplication primitive
        """
        self.config = config or CacheConfig()
        self._clock = clock
        self._flight = single_flight or SingleFlight()
        self._cache: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        self._generations: Dict[Hashable, int] = {}
        # Bumped by clear(), counts for every key
        self._epoch = 0
        self._lock = threading.Lock()
        self._stats = CacheStats()

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found/expired
        """
        value = self._lookup(key, record_stats=True)
        return None if value is _MISSING else value

    def set(
        self,
        key: Hashable,
        value: Any,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: TTL in seconds (uses default if None)
        """
        with self._lock:
            self._store(key, value, ttl_seconds)

    def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], T],
        ttl_seconds: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> T:
        """
        Get from cache or load and store.

        Args:
            key: Cache key
            loader: Function producing the value
            ttl_seconds: TTL in seconds
            timeout: Max seconds to wait for a load started by another caller

        Returns:
            Cached or loaded value
        """
        value = self._lookup(key, record_stats=True)
        if value is not _MISSING:
            return value
        return self.load(key, loader, ttl_seconds, timeout)

    def load(
        self,
        key: Hashable,
        loader: Callable[[], T],
        ttl_seconds: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> T:
        """
        Load key through the single flight and cache the result.

        Concurrent callers share a single call of loader. If the loader
        raises, nothing is cached and every waiting caller receives the
        exception. If the key is invalidated while loader runs, the
        result goes to the waiting callers only and is not cached.

        Args:
            key: Cache key
            loader: Function producing the value
            ttl_seconds: TTL in seconds
            timeout: Max seconds to wait for a load started by another caller

        Returns:
            Loaded value, or the cached one if a load finished meanwhile
        """
        generation = self.generation(key)
        return self._flight.do(
            (key, generation),
            lambda: self._load(key, generation, loader, ttl_seconds),
            timeout=timeout,
        )

    def generation(self, key: Hashable) -> int:
        """Current generation of key; changes on every invalidation."""
        with self._lock:
            return self._generation(key)

    def invalidate(self, key: Hashable) -> bool:
        """
        Invalidate a cache entry and any load in flight for it.

        Returns:
            True if entry was removed, False if not found
        """
        with self._lock:
            self._generations[key] = self._generations.get(key, 0) + 1
            if self._cache.pop(key, None) is not None:
                logger.debug(f"Cache INVALIDATED: {key}")
                return True
            return False

    def clear(self) -> None:
        """Clear all cache entries and supersede running loads."""
        with self._lock:
            self._epoch += 1
            self._cache.clear()
            logger.info("Cache CLEARED")

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                loads=self._stats.loads,
                load_failures=self._stats.load_failures,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
                current_entries=len(self._cache),
            )

    def _generation(self, key: Hashable) -> int:
        """Epoch plus per-key count; both only grow (must hold lock)."""
        return self._epoch + self._generations.get(key, 0)

    def _load(
        self,
        key: Hashable,
        generation: int,
        loader: Callable[[], T],
        ttl_seconds: Optional[float],
    ) -> T:
        """Run loader unless another flight stored the value meanwhile."""
        value = self._lookup(key, record_stats=False)
        if value is not _MISSING:
            return value

        with self._lock:
            self._stats.loads += 1
        try:
            value = loader()
        except Exception:
            with self._lock:
                self._stats.load_failures += 1
            raise

        with self._lock:
            if self._generation(key) != generation:
                logger.debug(f"Cache load for {key} superseded by invalidation, not stored")
            else:
                self._store(key, value, ttl_seconds)
        return value

    def _store(self, key: Hashable, value: Any, ttl_seconds: Optional[float]) -> None:
        """Insert an entry and evict beyond capacity (must hold lock)."""
        ttl = ttl_seconds if ttl_seconds is not None else self.config.default_ttl_seconds
        now = self._clock()
        self._cache.pop(key, None)
        self._cache[key] = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + ttl if ttl > 0 else None,
        )
        self._evict_if_needed()

        if self.config.log_access:
            logger.debug(f"Cache SET: {key} (TTL={ttl}s)")

    def _lookup(self, key: Hashable, record_stats: bool) -> Any:
        """Return the live value for key or _MISSING."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                if record_stats:
                    self._stats.misses += 1
                    if self.config.log_access:
                        logger.debug(f"Cache MISS: {key}")
                return _MISSING

            if entry.is_expired(self._clock()):
                del self._cache[key]
                self._stats.expirations += 1
                if record_stats:
                    self._stats.misses += 1
                    if self.config.log_access:
                        logger.debug(f"Cache EXPIRED: {key}")
                return _MISSING

            # Move to end for LRU
            self._cache.move_to_end(key)
            if record_stats:
                self._stats.hits += 1
                if self.config.log_access:
                    logger.debug(f"Cache HIT: {key}")
            return entry.value

    def _evict_if_needed(self) -> None:
        """Evict least recently used entries beyond max_entries (must hold lock)."""
        while len(self._cache) > max(self.config.max_entries, 1):
            key, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug(f"Cache EVICTED (LRU): {key}")
