from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.tag import TAG_COLORS, Tag
from notesync.core.schemas.tag import TagCreate, TagUpdate
from notesync.core.stores.base import EntityStore
from notesync.errors import NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.repositories.tag_repository import TagRepository

logger = get_logger(__name__)


class TagStore(EntityStore[Tag]):
    ENTITY = "Tag"

    def __init__(self, repo: TagRepository) -> None:
        super().__init__()
        self._repo = repo

    @property
    def tags(self) -> list[Tag]:
        return self.items

    def next_color(self) -> str:
        """Palette color for the next tag, cycling through TAG_COLORS."""
        return TAG_COLORS[len(self._items) % len(TAG_COLORS)]

    async def _fetch_all(self) -> Sequence[Tag]:
        return await self._repo.list()

    async def create(self, data: TagCreate | dict) -> Tag:
        request = data if isinstance(data, TagCreate) else TagCreate.model_validate(data)
        color = request.color or self.next_color()
        try:
            tag = await self._repo.create(name=request.name, color=color)
        except NotesyncError as err:
            logger.error("Failed to create tag %r: %s", request.name, err)
            raise
        self._items.append(tag)
        self._notify()
        return tag

    async def update(self, tag_id: UUID, changes: TagUpdate | dict) -> Tag:
        request = changes if isinstance(changes, TagUpdate) else TagUpdate.model_validate(changes)
        current = self._require(tag_id)
        diff = self._diff(current, request.changes())
        if not diff:
            return current
        try:
            updated = await self._repo.update(tag_id, diff)
        except NotesyncError as err:
            logger.error("Failed to update tag %s: %s", tag_id, err)
            raise
        self._replace(updated)
        self._notify()
        return updated

    async def delete(self, tag_id: UUID) -> None:
        self._require(tag_id)
        try:
            await self._repo.delete(tag_id)
        except NotesyncError as err:
            logger.error("Failed to delete tag %s: %s", tag_id, err)
            raise
        self._remove(tag_id)
        self._notify()
