from __future__ import annotations

import asyncio
import difflib
import re
from enum import Enum
from typing import TYPE_CHECKING

from notesync.core.schemas.note import NoteUpdate
from notesync.errors import EntityNotFoundError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from notesync.core.models.note import Note
    from notesync.core.stores.folders import FolderStore
    from notesync.core.stores.notes import NoteStore
    from notesync.core.stores.tags import TagStore
    from notesync.core.stores.ui import UIStore

logger = get_logger(__name__)

# Typos within this similarity still find a note
FUZZY_MIN_SCORE = 0.7
FUZZY_MIN_TERM = 3
_WORD_RE = re.compile(r"\w+")


class DeletionMode(str, Enum):
    """How notes referencing a deleted folder or tag are resolved."""

    REMOVE_REFERENCES = "remove_references"
    DELETE_NOTES = "delete_notes"


class Workspace:
    """The signed-in user's stores and the operations that span several of them."""

    def __init__(
        self,
        notes: NoteStore,
        folders: FolderStore,
        tags: TagStore,
        ui: UIStore,
    ) -> None:
        self.notes = notes
        self.folders = folders
        self.tags = tags
        self.ui = ui

    async def load_all(self) -> None:
        await asyncio.gather(self.notes.load(), self.folders.load(), self.tags.load())

    async def delete_folder(self, folder_id: UUID, mode: DeletionMode) -> None:
        """Delete a folder after resolving every note that lives in it."""
        if self.folders.get(folder_id) is None:
            raise EntityNotFoundError("Folder", folder_id, reload_required=True)

        members = self.notes.notes_in_folder(folder_id)
        logger.info(
            "Deleting folder %s (%d notes, mode=%s)", folder_id, len(members), mode.value
        )
        for note in members:
            if mode is DeletionMode.REMOVE_REFERENCES:
                await self.notes.update(note.id, NoteUpdate(folder_id=None))
            else:
                await self.notes.delete(note.id)

        if self.ui.selected_folder == folder_id:
            self.ui.set_selected_folder(None)
        await self.folders.delete(folder_id)

    async def delete_tag(self, tag_id: UUID, mode: DeletionMode) -> None:
        """Delete a tag after resolving every note associated with it."""
        if self.tags.get(tag_id) is None:
            raise EntityNotFoundError("Tag", tag_id, reload_required=True)

        members = self.notes.notes_with_tag(tag_id)
        logger.info("Deleting tag %s (%d notes, mode=%s)", tag_id, len(members), mode.value)
        for note in members:
            if mode is DeletionMode.REMOVE_REFERENCES:
                remaining = [t for t in note.tag_ids if t != tag_id]
                await self.notes.update(note.id, NoteUpdate(tag_ids=remaining))
            else:
                await self.notes.delete(note.id)

        if tag_id in self.ui.selected_tags:
            self.ui.toggle_tag(tag_id)
        await self.tags.delete(tag_id)

    def visible_notes(self) -> list[Note]:
        """Notes matching the current filters, pinned first, then most recently updated."""
        notes = self.notes.notes
        folder_id = self.ui.selected_folder
        tag_ids = self.ui.selected_tags
        query = self.ui.search_query.strip().lower()

        if folder_id is not None:
            notes = [n for n in notes if n.folder_id == folder_id]
        if tag_ids:
            notes = [n for n in notes if any(t in n.tag_ids for t in tag_ids)]
        if query:
            terms = query.split()
            notes = [n for n in notes if _matches(n, terms)]

        notes.sort(key=lambda n: n.updated_at, reverse=True)
        notes.sort(key=lambda n: not n.is_pinned)
        return notes

    def reset(self) -> None:
        self.notes.reset()
        self.folders.reset()
        self.tags.reset()
        self.ui.clear_filters()


def _matches(note: Note, terms: list[str]) -> bool:
    haystack = f"{note.title} {note.plain_text}".lower()
    words = set(_WORD_RE.findall(haystack))
    return all(term in haystack or _close_match(term, words) for term in terms)


def _close_match(term: str, words: set[str]) -> bool:
    # Short terms match as substrings only
    if len(term) < FUZZY_MIN_TERM:
        return False
    return any(
        difflib.SequenceMatcher(None, term, word).ratio() >= FUZZY_MIN_SCORE for word in words
    )
