"""
In-memory result cache for default board queries.

The board view asks for the same 12 hour lookahead over and over. Each
cold query costs one or more AeroDataBox calls, so results are memoized
for a short time, keyed by airport and local hour:

    ('EGLL', 2024-01-01 14:00)  ->  [FlightRecord, ...]   (expires in 120s)

Entries carry an absolute expiry. Computation runs outside the lock, so
two concurrent misses for the same key may both call upstream; the later
result simply replaces the earlier one.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, TypeVar

from flightboard.config import config
from flightboard.models.schedule import FlightRecord
from flightboard.timeutils import floor_to_hour

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ResultCache:
    """
    Thread-safe TTL cache with a get-or-compute primitive.

    Callers pass the TTL explicitly, so the same cache instance can hold
    entries with different lifetimes.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.max_entries = max_entries or config.cache.max_entries
        self._clock = clock

        # key -> (value, expires_at)
        self._cache: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get a cached value.

        Returns None if not cached or expired.
        """
        with self._lock:
            if key in self._cache:
                value, expires_at = self._cache[key]
                if self._clock() < expires_at:
                    self._hits += 1
                    return value
                # Expired
                del self._cache[key]

            self._misses += 1
        return None

    def set(self, key: Hashable, value: Any, ttl_seconds: float) -> None:
        with self._lock:
            self._cache[key] = (value, self._clock() + ttl_seconds)

            if len(self._cache) > self.max_entries:
                self._evict()

    def get_or_compute(self, key: Hashable, ttl_seconds: float, compute: Callable[[], T]) -> T:
        """
        Return the cached value for key, or compute, store and return it.

        compute() is called without holding the lock.
        """
        with self._lock:
            if key in self._cache:
                value, expires_at = self._cache[key]
                if self._clock() < expires_at:
                    self._hits += 1
                    return value
                del self._cache[key]
            self._misses += 1

        value = compute()
        self.set(key, value, ttl_seconds)
        return value

    def _evict(self) -> None:
        """Drop expired entries, then the soonest-expiring ones if still full."""
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._cache.items() if expires_at <= now]
        for key in expired:
            del self._cache[key]

        overflow = len(self._cache) - self.max_entries
        if overflow > 0:
            by_expiry = sorted(self._cache.items(), key=lambda item: item[1][1])
            for key, _ in by_expiry[:overflow]:
                del self._cache[key]

    def invalidate(self, key: Hashable) -> None:
        """Remove specific entry from cache."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._cache.clear()

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                'entries': len(self._cache),
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / lookups if lookups > 0 else 0,
            }


def hour_bucket_key(airport_code: str, as_of: datetime) -> Tuple[str, datetime]:
    """Cache key for a default board query: airport + local hour."""
    return airport_code.strip().upper(), floor_to_hour(as_of)


def cached_default_flights(
    cache: ResultCache,
    aggregator,
    airport_code: str,
    as_of: datetime,
    ttl_seconds: Optional[float] = None,
) -> List[FlightRecord]:
    """
    Default 12 hour board for airport_code, memoized per local hour.

    Within the TTL the exact list instance from the first call is returned.
    """
    key = hour_bucket_key(airport_code, as_of)
    ttl = ttl_seconds if ttl_seconds is not None else config.cache.ttl_seconds

    def compute() -> List[FlightRecord]:
        logger.debug(f'Board cache miss for {key[0]} @ {key[1]:%Y-%m-%d %H:00}')
        return aggregator.fetch_default(airport_code, as_of)

    return cache.get_or_compute(key, ttl, compute)


# Singleton instance
result_cache = ResultCache()
