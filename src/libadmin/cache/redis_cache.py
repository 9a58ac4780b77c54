"""Redis cache backend.

Values are stored as JSON under ``<key_prefix><key>`` and expire through
Redis TTLs.  Redis availability never decides whether a request
succeeds: connection errors turn reads into misses and writes or
invalidations into logged no-ops.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any

import redis

from libadmin.cache.base import Cache, CacheStats, format_hit_rate, resolve_ttl

logger = logging.getLogger(__name__)


def _redis_glob(pattern: str) -> str:
    """Escape Redis-only glob syntax so only ``*`` and ``?`` stay special."""
    return (
        pattern
        .replace("\\", "\\\\")
        .replace("[", "\\[")
        .replace("]", "\\]")
    )


class RedisCache(Cache):
    """Cache contract over a Redis server."""

    cache_type = "redis"

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        default_ttl: float | None = None,
        key_prefix: str = "libadmin:",
        socket_timeout: float = 2.0,
        client: redis.Redis | None = None,
    ) -> None:
        super().__init__()
        self.default_ttl = default_ttl
        self.key_prefix = key_prefix
        self._client = client or redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        self._lock = threading.Lock()
        self._counters = {"hits": 0, "misses": 0, "sets": 0, "deletes": 0}

    def _count(self, name: str, n: int = 1) -> None:
        with self._lock:
            self._counters[name] += n

    def _scan(self, pattern: str) -> list[str]:
        return list(
            self._client.scan_iter(match=self.key_prefix + _redis_glob(pattern)),
        )

    # -- contract -------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._client.get(self.key_prefix + key)
        except redis.RedisError as exc:
            logger.warning("Redis get(%s) failed, treating as miss: %s", key, exc)
            self._count("misses")
            return default
        if raw is None:
            self._count("misses")
            return default
        self._count("hits")
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = resolve_ttl(ttl_seconds, self.default_ttl, time.time())
        payload = json.dumps(value)
        try:
            if ttl:
                self._client.set(
                    self.key_prefix + key, payload, px=int(ttl * 1000),
                )
            else:
                self._client.set(self.key_prefix + key, payload)
        except redis.RedisError as exc:
            logger.warning("Redis set(%s) failed, skipping: %s", key, exc)
            return
        self._count("sets")

    def delete(self, key: str) -> bool:
        try:
            removed = self._client.delete(self.key_prefix + key)
        except redis.RedisError as exc:
            logger.warning("Redis delete(%s) failed: %s", key, exc)
            return False
        self._count("deletes", removed)
        return removed > 0

    def delete_pattern(self, pattern: str) -> int:
        try:
            keys = self._scan(pattern)
            removed = self._client.delete(*keys) if keys else 0
        except redis.RedisError as exc:
            logger.warning("Redis delete_pattern(%s) failed: %s", pattern, exc)
            return 0
        self._count("deletes", removed)
        return removed

    def clear(self) -> None:
        try:
            keys = self._scan("*")
            if keys:
                self._client.delete(*keys)
        except redis.RedisError as exc:
            logger.warning("Redis clear failed: %s", exc)
        with self._lock:
            self._counters = {"hits": 0, "misses": 0, "sets": 0, "deletes": 0}

    def has(self, key: str) -> bool:
        try:
            return self._client.exists(self.key_prefix + key) == 1
        except redis.RedisError as exc:
            logger.warning("Redis exists(%s) failed: %s", key, exc)
            return False

    def stats(self) -> CacheStats:
        with self._lock:
            counters = dict(self._counters)
        hit_rate = format_hit_rate(counters["hits"], counters["misses"])
        try:
            size = len(self._scan("*"))
        except redis.RedisError as exc:
            logger.warning("Redis stats unavailable: %s", exc)
            return CacheStats(
                type=self.cache_type, status="unavailable",
                hit_rate=hit_rate, **counters,
            )
        return CacheStats(
            type=self.cache_type, size=size, status="connected",
            hit_rate=hit_rate, **counters,
        )

    def close(self) -> None:
        self._client.close()
