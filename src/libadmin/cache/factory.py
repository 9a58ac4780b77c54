"""Build the configured cache backend from ``{"type": ..., "options": {...}}``."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from libadmin.cache.base import Cache
from libadmin.cache.memory import InMemoryCache
from libadmin.cache.redis_cache import RedisCache

logger = logging.getLogger(__name__)

# camelCase option names accepted in configuration mappings
_OPTION_ALIASES = {
    "defaultTTL": "default_ttl",
    "maxSize": "max_size",
    "sweepInterval": "sweep_interval",
    "keyPrefix": "key_prefix",
}


class CacheConfigurationError(ValueError):
    """Raised when the cache configuration names an unknown backend."""


def _normalise_options(options: Mapping[str, Any]) -> dict[str, Any]:
    return {_OPTION_ALIASES.get(k, k): v for k, v in options.items()}


class CacheFactory:
    """Registry of cache backends keyed by type name."""

    _registry: dict[str, type[Cache]] = {
        "memory": InMemoryCache,
        "redis": RedisCache,
    }

    @classmethod
    def create(
        cls,
        config: Mapping[str, Any] | None = None,
        *,
        type: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Cache:
        """Instantiate the backend named by ``config["type"]``.

        Raises
        ------
        CacheConfigurationError
            If the type is not registered.
        """
        config = dict(config or {})
        cache_type = type or config.get("type") or "memory"
        opts = _normalise_options(options or config.get("options") or {})

        cache_cls = cls._registry.get(cache_type)
        if cache_cls is None:
            raise CacheConfigurationError(
                f"Unknown cache type: {cache_type!r}. "
                f"Supported types: {', '.join(cls.available_types())}",
            )

        logger.info("Creating %s cache with options %s", cache_type, opts)
        return cache_cls(**opts)

    @classmethod
    def register(cls, name: str, cache_cls: type[Cache]) -> None:
        """Make *cache_cls* available under *name*."""
        if not (isinstance(cache_cls, type) and issubclass(cache_cls, Cache)):
            raise TypeError(f"{cache_cls!r} does not implement Cache")
        cls._registry[name] = cache_cls
        logger.info("Registered cache type %s", name)

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._registry.pop(name, None)

    @classmethod
    def available_types(cls) -> list[str]:
        return sorted(cls._registry)
