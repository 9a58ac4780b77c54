"""In-memory cache backend with TTL, insertion-order eviction and a sweep thread."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable

from libadmin.cache.base import (
    Cache,
    CacheEntry,
    CacheStats,
    format_hit_rate,
    resolve_ttl,
)
from libadmin.cache.keys import compile_glob

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000
DEFAULT_SWEEP_INTERVAL = 60.0


class InMemoryCache(Cache):
    """Process-local cache backed by an :class:`~collections.OrderedDict`.

    Parameters
    ----------
    default_ttl:
        TTL in seconds used when ``set`` is called without one.  ``None``
        means "expire at the next local midnight".
    max_size:
        Entry count at which the oldest-inserted entry is evicted to make
        room for a new key.  Reads do not affect eviction order.
    sweep_interval:
        Seconds between background sweeps of expired entries.  ``None``
        or ``0`` disables the sweep thread; expired entries are then only
        removed when accessed.
    timer:
        Clock returning POSIX seconds, ``time.time`` by default.
    """

    cache_type = "in-memory"

    def __init__(
        self,
        default_ttl: float | None = None,
        max_size: int = DEFAULT_MAX_SIZE,
        sweep_interval: float | None = DEFAULT_SWEEP_INTERVAL,
        timer: Callable[[], float] = time.time,
    ) -> None:
        super().__init__()
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._timer = timer
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._counters = self._zero_counters()

        self._sweep_interval = sweep_interval
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None
        if sweep_interval:
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                name="libadmin-cache-sweep",
                daemon=True,
            )
            self._sweeper.start()

    @staticmethod
    def _zero_counters() -> dict[str, int]:
        return {"hits": 0, "misses": 0, "sets": 0, "deletes": 0}

    # -- contract -------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._counters["misses"] += 1
                return default
            if entry.is_expired(self._timer()):
                del self._store[key]
                self._counters["deletes"] += 1
                self._counters["misses"] += 1
                return default
            self._counters["hits"] += 1
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        now = self._timer()
        ttl = resolve_ttl(ttl_seconds, self.default_ttl, now)
        entry = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + ttl if ttl else None,
        )
        with self._lock:
            if key in self._store:
                # Refreshed entries count as newly inserted.
                del self._store[key]
            elif len(self._store) >= self.max_size:
                evicted, _ = self._store.popitem(last=False)
                logger.debug("Evicted %s (max_size=%d)", evicted, self.max_size)
            self._store[key] = entry
            self._counters["sets"] += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._store.pop(key, None) is None:
                return False
            self._counters["deletes"] += 1
            return True

    def delete_pattern(self, pattern: str) -> int:
        regex = compile_glob(pattern)
        with self._lock:
            matched = [k for k in self._store if regex.fullmatch(k)]
            for key in matched:
                del self._store[key]
            self._counters["deletes"] += len(matched)
        if matched:
            logger.debug("Invalidated %d keys matching %s", len(matched), pattern)
        return len(matched)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._counters = self._zero_counters()

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._timer()):
                del self._store[key]
                self._counters["deletes"] += 1
                return False
            return True

    def stats(self) -> CacheStats:
        with self._lock:
            counters = dict(self._counters)
            size = len(self._store)
        return CacheStats(
            type=self.cache_type,
            size=size,
            max_size=self.max_size,
            hit_rate=format_hit_rate(counters["hits"], counters["misses"]),
            **counters,
        )

    # -- maintenance ----------------------------------------------------

    def keys(self) -> list[str]:
        """Snapshot of stored keys in insertion order (expired ones included)."""
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def sweep(self) -> int:
        """Remove every expired entry; return how many were removed."""
        now = self._timer()
        with self._lock:
            expired = [k for k, e in self._store.items() if e.is_expired(now)]
            for key in expired:
                del self._store[key]
            self._counters["deletes"] += len(expired)
        if expired:
            logger.debug("Sweep removed %d expired entries", len(expired))
        return len(expired)

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self._sweep_interval):
            self.sweep()

    def close(self) -> None:
        """Stop the sweep thread and drop all entries."""
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=2.0)
            self._sweeper = None
        with self._lock:
            self._store.clear()
