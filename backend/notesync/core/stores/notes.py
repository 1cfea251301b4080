from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.models.note import Note
from notesync.core.schemas.note import NoteCreate, NoteUpdate
from notesync.core.stores.base import EntityStore
from notesync.errors import EntityNotFoundError, NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)


class NoteStore(EntityStore[Note]):
    """Notes collection plus the single current-note selection."""

    ENTITY = "Note"

    def __init__(self, repo: NoteRepository) -> None:
        super().__init__()
        self._repo = repo
        self._current_id: UUID | None = None

    @property
    def notes(self) -> list[Note]:
        return self.items

    @property
    def current_note(self) -> Note | None:
        if self._current_id is None:
            return None
        return self.get(self._current_id)

    def set_current_note(self, note_id: UUID | None) -> None:
        if note_id is not None:
            self._require(note_id)
        self._current_id = note_id
        self._notify()

    def notes_in_folder(self, folder_id: UUID) -> list[Note]:
        return [n for n in self._items if n.folder_id == folder_id]

    def notes_with_tag(self, tag_id: UUID) -> list[Note]:
        return [n for n in self._items if tag_id in n.tag_ids]

    async def _fetch_all(self) -> Sequence[Note]:
        return await self._repo.list()

    def _after_load(self) -> None:
        if self._current_id is not None and self.get(self._current_id) is None:
            self._current_id = None

    async def create(self, data: NoteCreate | None = None) -> Note:
        """Create a note remotely, then prepend it and make it the current note."""
        request = data or NoteCreate()
        try:
            note = await self._repo.create(request)
        except NotesyncError as err:
            logger.error("Failed to create note: %s", err)
            raise
        self._items.insert(0, note)
        self._current_id = note.id
        self._notify()
        return note

    async def update(self, note_id: UUID, changes: NoteUpdate | dict) -> Note:
        request = changes if isinstance(changes, NoteUpdate) else NoteUpdate.model_validate(changes)
        current = self._require(note_id)
        diff = self._diff(current, request.changes())
        if not diff:
            return current

        logger.debug("Updating note %s fields=%s", note_id, sorted(diff))
        try:
            updated = await self._repo.update(note_id, diff)
        except NotesyncError as err:
            logger.error("Failed to update note %s: %s", note_id, err)
            raise
        self._replace(updated)
        self._notify()
        return updated

    async def delete(self, note_id: UUID) -> None:
        self._require(note_id)
        try:
            removed = await self._repo.delete(note_id)
        except NotesyncError as err:
            logger.error("Failed to delete note %s: %s", note_id, err)
            raise
        if not removed:
            logger.info("Note %s was already absent remotely", note_id)
        self._remove(note_id)
        if self._current_id == note_id:
            self._current_id = None
        self._notify()

    async def toggle_pin(self, note_id: UUID) -> Note:
        note = self.get(note_id)
        if note is None:
            raise EntityNotFoundError(self.ENTITY, note_id, reload_required=True)
        return await self.update(note_id, NoteUpdate(is_pinned=not note.is_pinned))

    def reset(self) -> None:
        self._current_id = None
        super().reset()
