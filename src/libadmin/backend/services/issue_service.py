"""Lending records ("issues"): lend and return books."""

from __future__ import annotations

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys

ISSUE_STATUSES = ("issued", "returned")


class IssueService(ResourceService):
    keys = CacheKeys.ISSUES
    # lending and returning change a book's available copies
    dependents = (CacheKeys.BOOKS,)

    def list_issues(self) -> list[Record]:
        return self._list(self.db.list_issues)

    def issue_book(
        self, book_id: str, user_id: str, issue_date: str, due_date: str,
    ) -> Record:
        if self.db.get_book(book_id) is None:
            raise LookupError(f"Book '{book_id}' not found")
        if self.db.get_user(user_id) is None:
            raise LookupError(f"User '{user_id}' not found")
        issue = self.db.create_issue(book_id, user_id, issue_date, due_date)
        self.invalidate()
        return issue

    def update_issue(
        self, issue_id: str, status: str, return_date: str | None = None,
    ) -> Record | None:
        if status not in ISSUE_STATUSES:
            raise ValueError(f"Invalid status '{status}'")
        issue = self.db.update_issue(issue_id, status, return_date)
        if issue is not None:
            self.invalidate()
        return issue
