from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notesync.core.models.note import Note
from notesync.core.repositories.implementations.supabase.base import SupabaseRepository
from notesync.core.repositories.note_repository import NoteRepository
from notesync.errors import BackendError, EntityNotFoundError
from notesync.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from notesync.core.schemas.note import NoteCreate


# Folder and tag links are embedded so a note is read in a single round trip
NOTE_SELECT = "*, folder:folders(*), note_tags(tag_id)"

_ROW_FIELDS = {"title", "content", "folder_id", "is_pinned"}


class SupabaseNoteRepository(SupabaseRepository, NoteRepository):
    """Supabase implementation of the NoteRepository.

    Assumes a `notes` table keyed by `user_id` and a `note_tags` join table with
    a unique (note_id, tag_id) pair. Tag links are replaced wholesale on update:
    existing rows are deleted before the new set is inserted, so the note is
    briefly untagged.
    """

    TABLE_NAME = "notes"
    LINK_TABLE = "note_tags"
    ENTITY = "Note"

    async def list(self) -> Sequence[Note]:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .select(NOTE_SELECT)
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
            .execute()
        )
        return [self._row_to_note(r) for r in resp.data or []]

    async def create(self, data: NoteCreate) -> Note:
        user_id = await self._current_user_id()
        row = {
            "user_id": user_id,
            "title": data.title,
            "content": data.content,
            "folder_id": str(data.folder_id) if data.folder_id else None,
            "is_pinned": data.is_pinned,
        }
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .insert(row)
            .execute()
        )
        created = self._first(resp.data)
        if not created.get("id"):
            raise BackendError("Note insert returned no row")

        if data.tag_ids:
            await self._insert_links(created["id"], data.tag_ids)

        return await self._fetch(created["id"], user_id)

    async def update(self, note_id: UUID, changes: dict) -> Note:
        user_id = await self._current_user_id()
        row_changes = self._changes_to_row(changes)

        if row_changes:
            resp = await self._execute(
                lambda: self._client.table(self.TABLE_NAME)
                .update(row_changes)
                .eq("id", str(note_id))
                .eq("user_id", user_id)
                .execute(),
                entity_id=note_id,
            )
            if not resp.data:
                raise EntityNotFoundError(self.ENTITY, note_id)
        elif "tag_ids" in changes:
            # Ownership check before touching join rows, which carry no user_id
            await self._fetch(str(note_id), user_id)
        else:
            logger.debug("No note fields to update for %s", note_id)

        if "tag_ids" in changes:
            await self._replace_links(str(note_id), changes["tag_ids"] or [])

        return await self._fetch(str(note_id), user_id)

    async def delete(self, note_id: UUID) -> bool:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(note_id))
            .eq("user_id", user_id)
            .execute(),
            entity_id=note_id,
        )
        items = resp.data or []
        return len(items) > 0

    async def _fetch(self, note_id: str, user_id: str) -> Note:
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .select(NOTE_SELECT)
            .eq("id", note_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute(),
            entity_id=note_id,
        )
        items = resp.data or []
        if not items:
            raise EntityNotFoundError(self.ENTITY, note_id)
        return self._row_to_note(items[0])

    async def _replace_links(self, note_id: str, tag_ids: Iterable[UUID]) -> None:
        logger.debug("Replacing tag links for note %s", note_id)
        await self._execute(
            lambda: self._client.table(self.LINK_TABLE)
            .delete()
            .eq("note_id", note_id)
            .execute(),
            entity_id=note_id,
        )
        await self._insert_links(note_id, tag_ids)

    async def _insert_links(self, note_id: str, tag_ids: Iterable[UUID]) -> None:
        rows = [{"note_id": str(note_id), "tag_id": str(tag_id)} for tag_id in tag_ids]
        if not rows:
            return
        await self._execute(
            lambda: self._client.table(self.LINK_TABLE)
            .insert(rows)
            .execute(),
            entity_id=note_id,
        )

    @staticmethod
    def _changes_to_row(changes: dict) -> dict[str, Any]:
        row: dict[str, Any] = {}
        for key, value in (changes or {}).items():
            if key not in _ROW_FIELDS:
                continue
            if key == "folder_id":
                value = str(value) if value else None
            row[key] = value
        return row

    @staticmethod
    def _row_to_note(row: dict[str, Any]) -> Note:
        links = row.get("note_tags") or []
        tag_ids = [link["tag_id"] for link in links if isinstance(link, dict) and link.get("tag_id")]
        return Note.model_validate(
            {
                "id": row["id"],
                "title": row.get("title") or "",
                "content": row.get("content") or "",
                "folder_id": row.get("folder_id"),
                "tag_ids": tag_ids,
                "is_pinned": bool(row.get("is_pinned")),
                "created_at": row["created_at"],
                "updated_at": row.get("updated_at") or row["created_at"],
            }
        )
