"""Client-side data access for the libadmin API.

Reads go through a local cache (``books:all``, ``books:42``...).  Writes
call the API and then patch the cached list in place with the
collection-consistency helpers instead of re-fetching it, and refresh or
drop the item entry.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from libadmin.cache import (
    Cache,
    CacheFactory,
    CacheKeys,
    ResourceKeys,
    TypedCache,
)

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_CACHE = {
    "type": "memory",
    "options": {"defaultTTL": None, "maxSize": 100},
}

Record = dict[str, Any]


class LibraryAPIError(Exception):
    """The API answered with an error status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CollectionClient:
    """List, create and update calls for one resource, cached under its keys."""

    def __init__(
        self, client: LibraryClient, path: str, keys: ResourceKeys,
    ) -> None:
        self.client = client
        self.path = path.strip("/")
        self.keys = keys
        self.typed: TypedCache[Record] = TypedCache(client.cache, keys)

    def get_all(self) -> list[Record]:
        return self.typed.load_all(
            lambda: self.client.request("GET", f"{self.path}/"),
        )

    def _drop_searches(self) -> None:
        self.client.cache.delete_pattern(self.keys.search("*"))

    def create(self, record: Mapping[str, Any]) -> Record:
        created = self.client.request("POST", f"{self.path}/", json=dict(record))
        self.typed.add(created)
        self.typed.set_item(created["id"], created)
        self._drop_searches()
        return created

    def update(self, item_id: str, record: Mapping[str, Any]) -> Record:
        updated = self.client.request(
            "PUT", f"{self.path}/{item_id}", json=dict(record),
        )
        self.typed.update(updated)
        self.typed.set_item(updated["id"], updated)
        self._drop_searches()
        return updated


class ResourceClient(CollectionClient):
    """Adds deletion to :class:`CollectionClient`."""

    def delete(self, item_id: str) -> None:
        self.client.request("DELETE", f"{self.path}/{item_id}")
        self.typed.remove(item_id)
        self.typed.delete_item(item_id)
        self._drop_searches()


class CatalogClient(ResourceClient):
    """Full CRUD, including read-through of single records."""

    def get_by_id(self, item_id: str) -> Record:
        record = self.typed.load_item(
            item_id,
            lambda: self.client.request("GET", f"{self.path}/{item_id}"),
        )
        return record  # type: ignore[return-value]


class BookClient(CatalogClient):
    def search(self, term: str) -> list[Record]:
        term = term.strip()
        return self.typed.load_search(
            term.lower(),
            lambda: self.client.request(
                "GET", f"{self.path}/search", params={"q": term},
            ),
        )


class IssueClient(CollectionClient):
    """Lending records.  Issues are never deleted, only returned.

    Lending a book takes one copy off its ``availableCopies`` and
    returning it puts the copy back, so writes here also patch the cached
    book list and book item.
    """

    def _cached_status(self, issue_id: str) -> str | None:
        for issue in self.typed.get_all() or ():
            if str(issue.get("id")) == str(issue_id):
                return issue.get("status")
        return None

    def _adjust_available_copies(self, book_id: object, delta: int) -> None:
        books = self.client.books.typed
        cached = books.get_all()
        if cached is not None:
            books.set_all([
                {**book, "availableCopies": max(0, book["availableCopies"] + delta)}
                if str(book.get("id")) == str(book_id) else book
                for book in cached
            ])
        book = books.get_item(book_id)
        if book is not None:
            books.set_item(book_id, {
                **book,
                "availableCopies": max(0, book["availableCopies"] + delta),
            })
        self.client.books._drop_searches()

    def create(self, record: Mapping[str, Any]) -> Record:
        created = super().create(record)
        self._adjust_available_copies(created["bookId"], -1)
        return created

    def update(self, item_id: str, record: Mapping[str, Any]) -> Record:
        previous = self._cached_status(item_id)
        updated = super().update(item_id, record)
        if updated.get("status") == "returned" and previous != "returned":
            if previous == "issued":
                self._adjust_available_copies(updated["bookId"], 1)
            else:
                # prior status unknown, so the cached count cannot be patched
                self.client.books.typed.invalidate()
        return updated


class LibraryClient:
    """Entry point for scripts and tools talking to a libadmin server.

    Parameters
    ----------
    base_url:
        API root, e.g. ``http://localhost:5000/api``.
    cache:
        A :class:`Cache` instance, or a ``{"type", "options"}`` mapping
        passed to :class:`CacheFactory`.  Defaults to a 100-entry
        in-memory cache expiring at midnight.
    session:
        Optional :class:`requests.Session` to reuse.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        cache: Cache | Mapping[str, Any] | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        if isinstance(cache, Cache):
            self.cache = cache
        else:
            self.cache = CacheFactory.create(cache or DEFAULT_CLIENT_CACHE)
        self.session = session or requests.Session()
        self.timeout = timeout

        self.books = BookClient(self, "books", CacheKeys.BOOKS)
        self.users = CatalogClient(self, "users", CacheKeys.USERS)
        self.categories = CatalogClient(self, "categories", CacheKeys.CATEGORIES)
        self.writers = CatalogClient(self, "writers", CacheKeys.WRITERS)
        self.issues = IssueClient(self, "issues", CacheKeys.ISSUES)
        self.book_requests = ResourceClient(
            self, "book-requests", CacheKeys.BOOK_REQUESTS,
        )

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Call the API and return the decoded JSON body."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(
                method, url, timeout=self.timeout, **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            raise LibraryAPIError(f"{method} {url} failed: {exc}") from exc

        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise LibraryAPIError(
                message or f"HTTP {resp.status_code}", resp.status_code,
            )
        return resp.json()

    # -- server cache administration ------------------------------------

    def cache_stats(self) -> dict[str, Any]:
        """Return the server cache counters."""
        return self.request("GET", "cache/stats")

    def clear_server_cache(self) -> None:
        self.request("POST", "cache/clear")
        logger.info("Server cache cleared")

    def clear_local_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        self.cache.close()
        self.session.close()
