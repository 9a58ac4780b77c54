"""Book catalog service with list, item and search caching."""

from __future__ import annotations

import logging
from typing import Any

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys

logger = logging.getLogger(__name__)


class DuplicateBookError(ValueError):
    """A book with the same title and writer set already exists."""


class BookService(ResourceService):
    """List, get, search, create, update and delete books."""

    keys = CacheKeys.BOOKS

    def list_books(self) -> list[Record]:
        return self._list(self.db.list_books)

    def get_book(self, book_id: str) -> Record | None:
        return self._item(book_id, lambda: self.db.get_book(book_id))

    def search_books(self, term: str) -> list[Record]:
        term = term.strip()
        return self.typed.load_search(
            term.lower(), lambda: self.db.search_books(term),
        )

    def _check_duplicate(
        self, fields: dict[str, Any], exclude_id: str | None = None,
    ) -> None:
        writer_ids = fields.get("writerIds") or []
        if not writer_ids or "title" not in fields:
            return
        if self.db.find_duplicate_book(fields["title"], writer_ids, exclude_id):
            raise DuplicateBookError(
                "A book with this title and writer(s) combination "
                "already exists",
            )

    def create_book(self, fields: dict[str, Any]) -> Record:
        self._check_duplicate(fields)
        book = self.db.create_book(fields)
        self.invalidate()
        logger.info("Created book %s (%s)", book["id"], book["title"])
        return book

    def update_book(self, book_id: str, fields: dict[str, Any]) -> Record | None:
        self._check_duplicate(fields, exclude_id=book_id)
        book = self.db.update_book(book_id, fields)
        if book is not None:
            self.invalidate()
        return book

    def delete_book(self, book_id: str) -> bool:
        deleted = self.db.delete_book(book_id)
        if deleted:
            # circulation rows cascade with the book
            self.invalidate(CacheKeys.ISSUES)
        return deleted
