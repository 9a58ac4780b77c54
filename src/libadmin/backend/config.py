"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os


def _optional_seconds(raw: str) -> float | None:
    """Parse a TTL setting; empty or ``none`` means "until midnight"."""
    if raw.strip().lower() in ("", "none", "null"):
        return None
    return float(raw)


class Config:
    """Default configuration for the Flask backend."""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key-change-in-prod")
    DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"

    # CORS: origins allowed to call this API
    CORS_ORIGINS = os.getenv(
        "CORS_ORIGINS", "http://localhost:*",
    ).split(",")

    # SQLite database path
    DATABASE_PATH = os.getenv(
        "DATABASE_PATH", "libadmin.db",
    )

    # Cache backend: "memory" or "redis"
    CACHE_TYPE = os.getenv("CACHE_TYPE", "memory")

    # TTL in seconds; unset = entries expire at the next local midnight
    CACHE_DEFAULT_TTL = _optional_seconds(os.getenv("CACHE_DEFAULT_TTL", ""))

    CACHE_MAX_SIZE = int(os.getenv("CACHE_MAX_SIZE", "1000"))

    # Seconds between sweeps of expired entries (0 = disabled)
    CACHE_SWEEP_INTERVAL = float(os.getenv("CACHE_SWEEP_INTERVAL", "60"))

    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")


class TestConfig(Config):
    """Configuration overrides for testing."""

    TESTING = True
    DATABASE_PATH = ":memory:"
    CACHE_TYPE = "memory"
    CACHE_DEFAULT_TTL = None
    CACHE_MAX_SIZE = 1000
    CACHE_SWEEP_INTERVAL = 0
