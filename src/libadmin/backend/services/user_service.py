"""User (library member) service."""

from __future__ import annotations

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys


class UserService(ResourceService):
    keys = CacheKeys.USERS
    # books embed owner details, issues embed borrower details
    dependents = (CacheKeys.BOOKS, CacheKeys.ISSUES)

    def list_users(self) -> list[Record]:
        return self._list(self.db.list_users)

    def get_user(self, user_id: str) -> Record | None:
        return self._item(user_id, lambda: self.db.get_user(user_id))

    def create_user(self, name: str, phone: str, email: str) -> Record:
        user = self.db.create_user(name=name, phone=phone, email=email)
        self.typed.invalidate()
        return user

    def update_user(
        self, user_id: str, name: str, phone: str, email: str,
    ) -> Record | None:
        user = self.db.update_user(user_id, name=name, phone=phone, email=email)
        if user is not None:
            self.invalidate()
        return user

    def delete_user(self, user_id: str) -> bool:
        deleted = self.db.delete_user(user_id)
        if deleted:
            self.invalidate()
        return deleted
