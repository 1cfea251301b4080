from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.models.folder import Folder
    from notesync.core.schemas.folder import FolderCreate


class FolderRepository(ABC):
    """Abstract repository interface for folders."""

    @abstractmethod
    async def list(self) -> Sequence[Folder]:  # pragma: no cover - interface only
        """Return the user's folders ordered by name."""

    @abstractmethod
    async def create(self, data: FolderCreate) -> Folder:  # pragma: no cover
        ...

    @abstractmethod
    async def update(self, folder_id: UUID, changes: dict) -> Folder:  # pragma: no cover
        ...

    @abstractmethod
    async def delete(self, folder_id: UUID) -> bool:  # pragma: no cover
        ...
