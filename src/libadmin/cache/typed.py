"""Typed view of one resource namespace in a shared cache."""

from __future__ import annotations

from typing import Any, Callable, Generic, Mapping, TypeVar

from libadmin.cache.base import Cache
from libadmin.cache.consistency import (
    add_to_array,
    remove_from_array,
    update_in_array,
)
from libadmin.cache.keys import ResourceKeys

V = TypeVar("V", bound=Mapping[str, Any])


class _NotFound(LookupError):
    """Raised inside a load to keep a missing record out of the cache."""


class TypedCache(Generic[V]):
    """Binds a :class:`Cache` to a :class:`ResourceKeys` namespace.

    ``TypedCache[Book](cache, CacheKeys.BOOKS)`` keeps every ``get``/``set``
    for books going through one typed accessor instead of raw keys.
    """

    def __init__(self, cache: Cache, keys: ResourceKeys) -> None:
        self.cache = cache
        self.keys = keys

    # list

    def get_all(self) -> list[V] | None:
        return self.cache.get(self.keys.all())

    def set_all(self, records: list[V], ttl_seconds: float | None = None) -> None:
        self.cache.set(self.keys.all(), records, ttl_seconds)

    def load_all(self, loader: Callable[[], list[V]]) -> list[V]:
        return self.cache.get_or_load(self.keys.all(), loader)

    # item

    def get_item(self, item_id: object) -> V | None:
        return self.cache.get(self.keys.item(item_id))

    def set_item(self, item_id: object, record: V) -> None:
        self.cache.set(self.keys.item(item_id), record)

    def delete_item(self, item_id: object) -> bool:
        return self.cache.delete(self.keys.item(item_id))

    def load_item(
        self,
        item_id: object,
        loader: Callable[[], V | None],
    ) -> V | None:
        """Read-through for one record; a ``None`` load is not cached.

        Goes through :meth:`Cache.get_or_load`, so concurrent misses on the
        same id share one call to *loader*.
        """
        def load() -> V:
            record = loader()
            if record is None:
                raise _NotFound(item_id)
            return record

        try:
            return self.cache.get_or_load(self.keys.item(item_id), load)
        except _NotFound:
            return None

    # search

    def get_search(self, term: str) -> list[V] | None:
        return self.cache.get(self.keys.search(term))

    def load_search(self, term: str, loader: Callable[[], list[V]]) -> list[V]:
        return self.cache.get_or_load(self.keys.search(term), loader)

    # collection consistency

    def add(self, record: V) -> bool:
        return add_to_array(self.cache, self.keys.all(), record)

    def update(self, record: V) -> bool:
        return update_in_array(self.cache, self.keys.all(), record)

    def remove(self, item_id: object) -> bool:
        return remove_from_array(self.cache, self.keys.all(), item_id)

    def invalidate(self) -> int:
        """Drop every cached key of this resource."""
        return self.cache.delete_pattern(self.keys.pattern)
