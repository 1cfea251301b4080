from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notesync.core.models.folder import DEFAULT_FOLDER_COLOR, Folder
from notesync.core.repositories.folder_repository import FolderRepository
from notesync.core.repositories.implementations.supabase.base import SupabaseRepository
from notesync.errors import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.schemas.folder import FolderCreate


class SupabaseFolderRepository(SupabaseRepository, FolderRepository):
    """Supabase implementation of the FolderRepository."""

    TABLE_NAME = "folders"
    ENTITY = "Folder"

    async def list(self) -> Sequence[Folder]:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("user_id", user_id)
            .order("name")
            .execute()
        )
        return [self._row_to_folder(r) for r in resp.data or []]

    async def create(self, data: FolderCreate) -> Folder:
        user_id = await self._current_user_id()
        row = {"user_id": user_id, "name": data.name, "color": data.color}
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME).insert(row).execute()
        )
        return self._row_to_folder(self._first(resp.data))

    async def update(self, folder_id: UUID, changes: dict) -> Folder:
        user_id = await self._current_user_id()
        sanitized = {k: v for k, v in (changes or {}).items() if k in {"name", "color"}}
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .update(sanitized)
            .eq("id", str(folder_id))
            .eq("user_id", user_id)
            .execute(),
            entity_id=folder_id,
        )
        items = resp.data or []
        if not items:
            raise EntityNotFoundError(self.ENTITY, folder_id)
        return self._row_to_folder(items[0])

    async def delete(self, folder_id: UUID) -> bool:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(folder_id))
            .eq("user_id", user_id)
            .execute(),
            entity_id=folder_id,
        )
        return len(resp.data or []) > 0

    @staticmethod
    def _row_to_folder(row: dict[str, Any]) -> Folder:
        return Folder.model_validate(
            {
                "id": row["id"],
                "name": row["name"],
                "color": row.get("color") or DEFAULT_FOLDER_COLOR,
                "created_at": row["created_at"],
                "updated_at": row.get("updated_at") or row["created_at"],
            }
        )
