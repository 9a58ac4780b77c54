"""Category service."""

from __future__ import annotations

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys


class CategoryService(ResourceService):
    keys = CacheKeys.CATEGORIES
    # book requests embed the category name
    dependents = (CacheKeys.BOOK_REQUESTS,)

    def list_categories(self) -> list[Record]:
        return self._list(self.db.list_categories)

    def get_category(self, category_id: str) -> Record | None:
        return self._item(category_id, lambda: self.db.get_category(category_id))

    def create_category(
        self,
        name: str,
        description: str | None = None,
        abbreviation: str | None = None,
    ) -> Record:
        category = self.db.create_category(name, description, abbreviation)
        self.typed.invalidate()
        return category

    def update_category(
        self,
        category_id: str,
        name: str,
        description: str | None = None,
        abbreviation: str | None = None,
    ) -> Record | None:
        category = self.db.update_category(
            category_id, name, description, abbreviation,
        )
        if category is not None:
            self.invalidate()
        return category

    def delete_category(self, category_id: str) -> bool:
        deleted = self.db.delete_category(category_id)
        if deleted:
            # book links cascade
            self.invalidate(CacheKeys.BOOKS)
        return deleted
