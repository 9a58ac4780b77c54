"""Keep cached collections consistent after a single-record write.

Each helper works on a cache entry holding a list of records with an
``id`` field and replaces it with an updated copy, so a create, update or
delete does not force a re-fetch of the whole list.

If the list key is not cached, the helpers do nothing and never prime the
cache.  A write made while the list is cold therefore leaves it cold,
and the next read-through returns fresh data.  This does not make the
list fresh in every case: a cold list primed by a read that raced with
an in-flight write can hold the pre-write snapshot until its TTL runs
out or the resource pattern is invalidated, and nothing here detects that.
"""

from __future__ import annotations

from typing import Any, Mapping

from libadmin.cache.base import Cache

_MISSING = object()


def _same_id(record: Mapping[str, Any], item_id: object) -> bool:
    return str(record.get("id")) == str(item_id)


def _cached_list(cache: Cache, key: str) -> list | None:
    cached = cache.get(key, _MISSING)
    if cached is _MISSING or not isinstance(cached, list):
        return None
    return cached


def add_to_array(cache: Cache, key: str, item: Mapping[str, Any]) -> bool:
    """Append *item* to the cached list under *key*.

    Returns True if the list was cached and updated.
    """
    cached = _cached_list(cache, key)
    if cached is None:
        return False
    cache.set(key, [*cached, item])
    return True


def update_in_array(cache: Cache, key: str, item: Mapping[str, Any]) -> bool:
    """Replace the element whose id matches ``item["id"]``."""
    cached = _cached_list(cache, key)
    if cached is None:
        return False
    item_id = item["id"]
    if not any(_same_id(r, item_id) for r in cached):
        return False
    cache.set(key, [item if _same_id(r, item_id) else r for r in cached])
    return True


def remove_from_array(cache: Cache, key: str, item_id: object) -> bool:
    """Drop the element with *item_id* from the cached list."""
    cached = _cached_list(cache, key)
    if cached is None:
        return False
    for index, record in enumerate(cached):
        if _same_id(record, item_id):
            cache.set(key, cached[:index] + cached[index + 1:])
            return True
    return False
