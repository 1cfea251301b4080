from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.base import utcnow
from notesync.core.models.note import Note
from notesync.core.repositories.implementations.local.base import LocalRepository
from notesync.core.repositories.note_repository import NoteRepository
from notesync.errors import EntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.schemas.note import NoteCreate


class LocalNoteRepository(LocalRepository, NoteRepository):
    """NoteRepository backed by the local cache snapshot."""

    async def list(self) -> Sequence[Note]:
        notes = self._cache.get().notes
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)

    async def create(self, data: NoteCreate) -> Note:
        now = utcnow()
        note = Note(**data.model_dump(), created_at=now, updated_at=now)
        notes = self._cache.get().notes
        self._cache.update(notes=[note, *notes])
        return note

    async def update(self, note_id: UUID, changes: dict) -> Note:
        notes = self._cache.get().notes
        for index, note in enumerate(notes):
            if note.id == note_id:
                updated = Note.model_validate(
                    {**note.model_dump(), **changes, "updated_at": utcnow()}
                )
                notes[index] = updated
                self._cache.update(notes=notes)
                return updated
        raise EntityNotFoundError("Note", note_id)

    async def delete(self, note_id: UUID) -> bool:
        notes = self._cache.get().notes
        remaining = [n for n in notes if n.id != note_id]
        if len(remaining) == len(notes):
            return False
        self._cache.update(notes=remaining)
        return True
