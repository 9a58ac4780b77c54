"""Operator-facing cache monitoring: statistics and manual clear."""

from __future__ import annotations

import logging
from typing import Any

from libadmin.cache import Cache

logger = logging.getLogger(__name__)


class CacheService:
    """Thin wrapper over the application cache for the monitoring routes."""

    def __init__(self, cache: Cache) -> None:
        self.cache = cache

    def stats(self) -> dict[str, Any]:
        return self.cache.stats().to_dict()

    def clear(self) -> None:
        self.cache.clear()
        logger.info("Cache cleared by operator")
