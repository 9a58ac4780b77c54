"""Writer (author) service."""

from __future__ import annotations

from libadmin.backend.services.resource_service import Record, ResourceService
from libadmin.cache import CacheKeys


class WriterService(ResourceService):
    keys = CacheKeys.WRITERS

    def list_writers(self) -> list[Record]:
        return self._list(self.db.list_writers)

    def get_writer(self, writer_id: str) -> Record | None:
        return self._item(writer_id, lambda: self.db.get_writer(writer_id))

    def create_writer(
        self,
        name: str,
        nationality: str | None = None,
        bio: str | None = None,
        image_url: str | None = None,
    ) -> Record:
        writer = self.db.create_writer(name, nationality, bio, image_url)
        self.invalidate()
        return writer

    def update_writer(
        self,
        writer_id: str,
        name: str,
        nationality: str | None = None,
        bio: str | None = None,
        image_url: str | None = None,
    ) -> Record | None:
        writer = self.db.update_writer(
            writer_id, name, nationality, bio, image_url,
        )
        if writer is not None:
            self.invalidate()
        return writer

    def delete_writer(self, writer_id: str) -> bool:
        deleted = self.db.delete_writer(writer_id)
        if deleted:
            self.invalidate(CacheKeys.BOOKS)
        return deleted
