"""Cache key naming and invalidation patterns.

Keys follow ``"<resource>:<selector>"``: ``books:all`` for the list,
``books:42`` for one item, ``books:search:<term>`` for a search.  Each
resource's pattern (``books:*``) matches its whole cache footprint, so a
single :meth:`~libadmin.cache.base.Cache.delete_pattern` call after a
write drops both list and item entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob (``*`` any run, ``?`` one char) to an anchored regex."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def glob_match(pattern: str, key: str) -> bool:
    """Return True if *key* matches *pattern* in full."""
    return compile_glob(pattern).fullmatch(key) is not None


@dataclass(frozen=True)
class ResourceKeys:
    """Key builders for one resource namespace."""

    name: str

    def all(self) -> str:
        return f"{self.name}:all"

    def item(self, item_id: object) -> str:
        return f"{self.name}:{item_id}"

    def search(self, term: str) -> str:
        return f"{self.name}:search:{term}"

    @property
    def pattern(self) -> str:
        """Glob matching every key of this resource."""
        return f"{self.name}:*"


class CacheKeys:
    """Catalog of the resource namespaces used by the API and the client."""

    BOOKS = ResourceKeys("books")
    USERS = ResourceKeys("users")
    CATEGORIES = ResourceKeys("categories")
    WRITERS = ResourceKeys("writers")
    ISSUES = ResourceKeys("issues")
    BOOK_REQUESTS = ResourceKeys("book-requests")

    @classmethod
    def resources(cls) -> list[ResourceKeys]:
        return [
            cls.BOOKS, cls.USERS, cls.CATEGORIES,
            cls.WRITERS, cls.ISSUES, cls.BOOK_REQUESTS,
        ]
