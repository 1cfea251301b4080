from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.base import utcnow
from notesync.core.models.tag import Tag
from notesync.core.repositories.implementations.local.base import LocalRepository
from notesync.core.repositories.tag_repository import TagRepository
from notesync.errors import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class LocalTagRepository(LocalRepository, TagRepository):
    """TagRepository backed by the local cache snapshot."""

    async def list(self) -> Sequence[Tag]:
        return sorted(self._cache.get().tags, key=lambda t: t.name)

    async def create(self, *, name: str, color: str) -> Tag:
        now = utcnow()
        tag = Tag(name=name, color=color, created_at=now, updated_at=now)
        tags = self._cache.get().tags
        self._cache.update(tags=[*tags, tag])
        return tag

    async def update(self, tag_id: UUID, changes: dict) -> Tag:
        tags = self._cache.get().tags
        for index, tag in enumerate(tags):
            if tag.id == tag_id:
                updated = Tag.model_validate({**tag.model_dump(), **changes, "updated_at": utcnow()})
                tags[index] = updated
                self._cache.update(tags=tags)
                return updated
        raise EntityNotFoundError("Tag", tag_id)

    async def delete(self, tag_id: UUID) -> bool:
        snapshot = self._cache.get()
        remaining = [t for t in snapshot.tags if t.id != tag_id]
        if len(remaining) == len(snapshot.tags):
            return False
        # Mirror the join-table cascade of the remote schema
        notes = [
            n.model_copy(update={"tag_ids": [t for t in n.tag_ids if t != tag_id]})
            if tag_id in n.tag_ids
            else n
            for n in snapshot.notes
        ]
        self._cache.update(tags=remaining, notes=notes)
        return True
