from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.folder import Folder
from notesync.core.schemas.folder import FolderCreate, FolderUpdate
from notesync.core.stores.base import EntityStore
from notesync.errors import NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.repositories.folder_repository import FolderRepository

logger = get_logger(__name__)


class FolderStore(EntityStore[Folder]):
    ENTITY = "Folder"

    def __init__(self, repo: FolderRepository) -> None:
        super().__init__()
        self._repo = repo

    @property
    def folders(self) -> list[Folder]:
        return self.items

    async def _fetch_all(self) -> Sequence[Folder]:
        return await self._repo.list()

    async def create(self, data: FolderCreate | dict) -> Folder:
        request = data if isinstance(data, FolderCreate) else FolderCreate.model_validate(data)
        try:
            folder = await self._repo.create(request)
        except NotesyncError as err:
            logger.error("Failed to create folder %r: %s", request.name, err)
            raise
        self._items.append(folder)
        self._notify()
        return folder

    async def update(self, folder_id: UUID, changes: FolderUpdate | dict) -> Folder:
        request = changes if isinstance(changes, FolderUpdate) else FolderUpdate.model_validate(changes)
        current = self._require(folder_id)
        diff = self._diff(current, request.changes())
        if not diff:
            return current
        try:
            updated = await self._repo.update(folder_id, diff)
        except NotesyncError as err:
            logger.error("Failed to update folder %s: %s", folder_id, err)
            raise
        self._replace(updated)
        self._notify()
        return updated

    async def delete(self, folder_id: UUID) -> None:
        self._require(folder_id)
        try:
            await self._repo.delete(folder_id)
        except NotesyncError as err:
            logger.error("Failed to delete folder %s: %s", folder_id, err)
            raise
        self._remove(folder_id)
        self._notify()
