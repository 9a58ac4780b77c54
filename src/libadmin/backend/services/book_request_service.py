"""Requests from members for books the library does not hold yet."""

from __future__ import annotations

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys

REQUEST_STATUSES = ("pending", "fulfilled", "rejected")


class BookRequestService(ResourceService):
    keys = CacheKeys.BOOK_REQUESTS

    def list_requests(self) -> list[Record]:
        return self._list(self.db.list_book_requests)

    def create_request(
        self,
        book_name: str,
        request_date: str,
        category_id: str | None = None,
        author_name: str | None = None,
    ) -> Record:
        request = self.db.create_book_request(
            book_name, request_date, category_id, author_name,
        )
        self.invalidate()
        return request

    def update_request(
        self,
        request_id: str,
        book_name: str,
        request_date: str,
        status: str,
        category_id: str | None = None,
        author_name: str | None = None,
    ) -> Record | None:
        if status not in REQUEST_STATUSES:
            raise ValueError(f"Invalid status '{status}'")
        request = self.db.update_book_request(
            request_id, book_name, request_date, status,
            category_id, author_name,
        )
        if request is not None:
            self.invalidate()
        return request

    def delete_request(self, request_id: str) -> bool:
        deleted = self.db.delete_book_request(request_id)
        if deleted:
            self.invalidate()
        return deleted
