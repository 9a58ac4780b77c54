"""Cache abstraction: contract, backends, factory, key catalog and helpers.

Main modules:
- base: Cache contract, CacheEntry, CacheStats, TTL resolution
- memory: InMemoryCache with eviction and background sweep
- redis_cache: RedisCache backend
- factory: CacheFactory registry
- keys: key naming and glob invalidation patterns
- consistency: in-place updates of cached collections
- typed: TypedCache accessor per resource
"""

from __future__ import annotations

from typing import Any

from .base import Cache, CacheEntry, CacheStats
from .consistency import add_to_array, remove_from_array, update_in_array
from .factory import CacheConfigurationError, CacheFactory
from .keys import CacheKeys, ResourceKeys, compile_glob
from .memory import InMemoryCache
from .redis_cache import RedisCache
from .typed import TypedCache


def build_cache(config: Any) -> Cache:
    """Build the application cache from a Flask-style config object."""
    options: dict[str, Any] = {"default_ttl": config.CACHE_DEFAULT_TTL}
    if config.CACHE_TYPE == "memory":
        options["max_size"] = config.CACHE_MAX_SIZE
        options["sweep_interval"] = config.CACHE_SWEEP_INTERVAL
    elif config.CACHE_TYPE == "redis":
        options["url"] = config.REDIS_URL
    return CacheFactory.create(type=config.CACHE_TYPE, options=options)


__all__ = [
    "Cache",
    "CacheConfigurationError",
    "CacheEntry",
    "CacheFactory",
    "CacheKeys",
    "CacheStats",
    "InMemoryCache",
    "RedisCache",
    "ResourceKeys",
    "TypedCache",
    "add_to_array",
    "build_cache",
    "compile_glob",
    "remove_from_array",
    "update_in_array",
]
