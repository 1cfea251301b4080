from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notesync.core.models.tag import TAG_COLORS, Tag
from notesync.core.repositories.implementations.supabase.base import SupabaseRepository
from notesync.core.repositories.tag_repository import TagRepository
from notesync.errors import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class SupabaseTagRepository(SupabaseRepository, TagRepository):
    """Supabase implementation of the TagRepository."""

    TABLE_NAME = "tags"
    ENTITY = "Tag"

    async def list(self) -> Sequence[Tag]:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("user_id", user_id)
            .order("name")
            .execute()
        )
        return [self._row_to_tag(r) for r in resp.data or []]

    async def create(self, *, name: str, color: str) -> Tag:
        user_id = await self._current_user_id()
        row = {"user_id": user_id, "name": name, "color": color}
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME).insert(row).execute()
        )
        return self._row_to_tag(self._first(resp.data))

    async def update(self, tag_id: UUID, changes: dict) -> Tag:
        user_id = await self._current_user_id()
        sanitized = {k: v for k, v in (changes or {}).items() if k in {"name", "color"}}
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .update(sanitized)
            .eq("id", str(tag_id))
            .eq("user_id", user_id)
            .execute(),
            entity_id=tag_id,
        )
        items = resp.data or []
        if not items:
            raise EntityNotFoundError(self.ENTITY, tag_id)
        return self._row_to_tag(items[0])

    async def delete(self, tag_id: UUID) -> bool:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(tag_id))
            .eq("user_id", user_id)
            .execute(),
            entity_id=tag_id,
        )
        return len(resp.data or []) > 0

    @staticmethod
    def _row_to_tag(row: dict[str, Any]) -> Tag:
        return Tag.model_validate(
            {
                "id": row["id"],
                "name": row["name"],
                "color": row.get("color") or TAG_COLORS[0],
                "created_at": row["created_at"],
                "updated_at": row.get("updated_at") or row["created_at"],
            }
        )
