"""Shared read-through / invalidate-on-write plumbing for resource services."""

from __future__ import annotations

import logging
from typing import Any, Callable

from libadmin.backend.database import Database
from libadmin.cache import Cache, ResourceKeys, TypedCache

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class ResourceService:
    """Base class binding a resource namespace to the database and cache.

    Reads go through the cache; every write drops the resource's whole
    key pattern plus the patterns of resources whose cached views embed
    fields of this one (see :attr:`dependents`).
    """

    keys: ResourceKeys
    dependents: tuple[ResourceKeys, ...] = ()

    def __init__(self, db: Database, cache: Cache) -> None:
        self.db = db
        self.cache = cache
        self.typed: TypedCache[Record] = TypedCache(cache, self.keys)

    def _list(self, loader: Callable[[], list[Record]]) -> list[Record]:
        return self.typed.load_all(loader)

    def _item(
        self,
        item_id: str,
        loader: Callable[[], Record | None],
    ) -> Record | None:
        return self.typed.load_item(item_id, loader)

    def invalidate(self, *extra: ResourceKeys) -> int:
        """Drop this resource's keys and those of its dependents."""
        removed = self.typed.invalidate()
        for keys in (*self.dependents, *extra):
            removed += self.cache.delete_pattern(keys.pattern)
        logger.debug("Write to %s invalidated %d keys", self.keys.name, removed)
        return removed
