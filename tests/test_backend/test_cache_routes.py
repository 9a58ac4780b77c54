"""Tests for the cache monitoring routes."""

from __future__ import annotations

import pytest

from libadmin.backend.app import create_app
from libadmin.backend import config
from libadmin.cache import CacheConfigurationError


def test_stats_empty(client):
    resp = client.get("/api/cache/stats")
    assert resp.status_code == 200
    assert resp.get_json() == {
        "type": "in-memory",
        "size": 0,
        "maxSize": 1000,
        "hits": 0,
        "misses": 0,
        "sets": 0,
        "deletes": 0,
        "hitRate": "0.00%",
    }


def test_stats_after_reads(client):
    client.get("/api/users/")  # miss + set
    client.get("/api/users/")  # hit
    client.get("/api/users/")  # hit
    stats = client.get("/api/cache/stats").get_json()
    assert stats["size"] == 1
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["sets"] == 1
    assert stats["hitRate"] == "66.67%"


def test_clear(client, cache):
    client.get("/api/books/")
    client.get("/api/writers/")
    resp = client.post("/api/cache/clear")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    stats = client.get("/api/cache/stats").get_json()
    assert stats["size"] == 0
    assert stats["sets"] == 0
    assert stats["misses"] == 0


def test_unknown_cache_type_fails_startup():
    class BadConfig(config.TestConfig):
        CACHE_TYPE = "carrier-pigeon"

    with pytest.raises(CacheConfigurationError):
        create_app(BadConfig)


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}
