"""Cache contract shared by every backend.

A cache maps opaque string keys (``"<resource>:<selector>"``) to
:class:`CacheEntry` snapshots.  Callers only depend on :class:`Cache`;
concrete stores are built through :class:`~libadmin.cache.factory.CacheFactory`.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, Field

V = TypeVar("V")

_MISSING = object()


@dataclass
class CacheEntry(Generic[V]):
    """A stored value plus its creation and expiry timestamps (POSIX seconds)."""

    value: V
    created_at: float
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class CacheStats(BaseModel):
    """Point-in-time counters reported by :meth:`Cache.stats`."""

    type: str
    size: int = 0
    max_size: int | None = Field(default=None, alias="maxSize")
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    hit_rate: str = Field(default="0.00%", alias="hitRate")
    status: str | None = None

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON shape served by ``/api/cache/stats``."""
        return self.model_dump(by_alias=True, exclude_none=True)


def format_hit_rate(hits: int, misses: int) -> str:
    """Format ``hits / (hits + misses)`` as a percentage with two decimals."""
    total = hits + misses
    if total == 0:
        return "0.00%"
    return f"{hits / total * 100:.2f}%"


def seconds_until_midnight(now: datetime) -> int:
    """Whole seconds from *now* until the next local midnight.

    Naive *now* is read as local time.  Both ends are converted to aware
    datetimes before subtracting, so a day with a daylight-saving change
    yields its real length (23 or 25 hours) rather than 24.
    """
    local = now.astimezone()
    midnight = (local.replace(tzinfo=None) + timedelta(days=1)).replace(
        hour=0, minute=0, second=0, microsecond=0,
    ).astimezone()
    # never 0: a zero TTL would mean "no expiry"
    return max(1, int((midnight - local).total_seconds()))


def resolve_ttl(
    ttl_seconds: float | None,
    default_ttl: float | None,
    now: float,
) -> float:
    """Pick the TTL for a ``set`` call.

    An explicit *ttl_seconds* wins, then *default_ttl*; when the default
    is ``None`` the entry lives until the next local midnight so cached
    data turns over once per calendar day.
    """
    if ttl_seconds is not None:
        return ttl_seconds
    if default_ttl is not None:
        return default_ttl
    return seconds_until_midnight(datetime.fromtimestamp(now))


class Cache(ABC):
    """Uniform cache contract.

    ``get``/``has`` never raise for a missing key, and ``stats`` never
    raises.  Values are immutable snapshots: replace them with ``set``
    rather than mutating what ``get`` returned.
    """

    cache_type = "abstract"

    def __init__(self) -> None:
        self._pending: dict[str, Future] = {}
        self._pending_lock = threading.Lock()

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the unexpired value for *key*, else *default*."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store *value* under *key*, replacing any existing entry."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if something was removed."""

    @abstractmethod
    def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching the glob *pattern*; return the count."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries and reset the statistics counters."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """Existence check with the same expiry semantics as :meth:`get`."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Return point-in-time counters."""

    # -- read-through ---------------------------------------------------

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], V],
        ttl_seconds: float | None = None,
    ) -> V:
        """Return the cached value for *key*, loading it on a miss.

        Concurrent misses on the same key share one call to *loader*;
        the others block until it finishes and receive its result (or
        its exception).  Failed loads are not cached.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        with self._pending_lock:
            future = self._pending.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._pending[key] = future

        if not owner:
            return future.result()

        try:
            value = loader()
            self.set(key, value, ttl_seconds)
        except Exception as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(value)
            return value
        finally:
            with self._pending_lock:
                self._pending.pop(key, None)

    # -- lifecycle ------------------------------------------------------

    def close(self) -> None:
        """Release background resources held by the backend."""

    def __enter__(self) -> Cache:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
