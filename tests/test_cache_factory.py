"""Tests for the cache factory registry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from libadmin.cache import (
    Cache,
    CacheConfigurationError,
    CacheFactory,
    InMemoryCache,
    RedisCache,
    build_cache,
)
from libadmin.backend import config


def test_default_is_memory():
    cache = CacheFactory.create({"options": {"sweepInterval": 0}})
    assert isinstance(cache, InMemoryCache)
    cache.close()


def test_camel_case_options():
    cache = CacheFactory.create({
        "type": "memory",
        "options": {"defaultTTL": None, "maxSize": 5, "sweepInterval": 0},
    })
    assert cache.max_size == 5
    assert cache.default_ttl is None
    assert cache.stats().max_size == 5
    cache.close()


def test_keyword_form():
    cache = CacheFactory.create(type="memory", options={"max_size": 3, "sweep_interval": 0})
    assert cache.max_size == 3
    cache.close()


def test_unknown_type_is_fatal():
    with pytest.raises(CacheConfigurationError, match="memcached"):
        CacheFactory.create({"type": "memcached"})


def test_available_types():
    assert {"memory", "redis"} <= set(CacheFactory.available_types())


def test_redis_type_builds_redis_cache():
    cache = CacheFactory.create(type="redis", options={"client": MagicMock()})
    assert isinstance(cache, RedisCache)


class DictCache(Cache):
    """Minimal backend used to exercise registration."""

    cache_type = "dict"

    def __init__(self, **options):
        super().__init__()
        self.options = options
        self.data = {}

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value, ttl_seconds=None):
        self.data[key] = value

    def delete(self, key):
        return self.data.pop(key, None) is not None

    def delete_pattern(self, pattern):
        return 0

    def clear(self):
        self.data.clear()

    def has(self, key):
        return key in self.data

    def stats(self):
        from libadmin.cache import CacheStats
        return CacheStats(type=self.cache_type, size=len(self.data))


def test_register_custom_backend():
    CacheFactory.register("dict", DictCache)
    try:
        cache = CacheFactory.create({"type": "dict", "options": {"flavour": "plain"}})
        assert isinstance(cache, DictCache)
        assert cache.options == {"flavour": "plain"}
        cache.set("books:all", [1])
        assert cache.get_or_load("books:all", lambda: [2]) == [1]
    finally:
        CacheFactory.unregister("dict")
    assert "dict" not in CacheFactory.available_types()


def test_register_rejects_non_cache():
    with pytest.raises(TypeError):
        CacheFactory.register("bogus", dict)


def test_build_cache_from_config():
    cache = build_cache(config.TestConfig)
    assert isinstance(cache, InMemoryCache)
    assert cache.max_size == config.TestConfig.CACHE_MAX_SIZE
    cache.close()


def test_build_cache_unknown_type():
    class BadConfig(config.TestConfig):
        CACHE_TYPE = "nope"

    with pytest.raises(CacheConfigurationError):
        build_cache(BadConfig)
