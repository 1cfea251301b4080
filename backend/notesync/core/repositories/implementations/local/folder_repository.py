from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.base import utcnow
from notesync.core.models.folder import Folder
from notesync.core.repositories.folder_repository import FolderRepository
from notesync.core.repositories.implementations.local.base import LocalRepository
from notesync.errors import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.schemas.folder import FolderCreate


class LocalFolderRepository(LocalRepository, FolderRepository):
    """FolderRepository backed by the local cache snapshot."""

    async def list(self) -> Sequence[Folder]:
        return sorted(self._cache.get().folders, key=lambda f: f.name)

    async def create(self, data: FolderCreate) -> Folder:
        now = utcnow()
        folder = Folder(name=data.name, color=data.color, created_at=now, updated_at=now)
        folders = self._cache.get().folders
        self._cache.update(folders=[*folders, folder])
        return folder

    async def update(self, folder_id: UUID, changes: dict) -> Folder:
        folders = self._cache.get().folders
        for index, folder in enumerate(folders):
            if folder.id == folder_id:
                updated = Folder.model_validate(
                    {**folder.model_dump(), **changes, "updated_at": utcnow()}
                )
                folders[index] = updated
                self._cache.update(folders=folders)
                return updated
        raise EntityNotFoundError("Folder", folder_id)

    async def delete(self, folder_id: UUID) -> bool:
        folders = self._cache.get().folders
        remaining = [f for f in folders if f.id != folder_id]
        if len(remaining) == len(folders):
            return False
        self._cache.update(folders=remaining)
        return True
