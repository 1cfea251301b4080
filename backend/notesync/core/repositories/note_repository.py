from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.models.note import Note
    from notesync.core.schemas.note import NoteCreate


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Contract used by stores and the bootstrap service. Implementations perform
    I/O (network, disk) and therefore expose async methods. All operations are
    scoped to the authenticated user; no method accepts a user id.
    """

    @abstractmethod
    async def list(self) -> Sequence[Note]:  # pragma: no cover - interface only
        """Return the user's notes with tag links, most recently updated first."""

    @abstractmethod
    async def create(self, data: NoteCreate) -> Note:  # pragma: no cover
        """Persist a new note (and its tag links) and return the stored entity."""

    @abstractmethod
    async def update(self, note_id: UUID, changes: dict) -> Note:  # pragma: no cover
        """Apply a partial update and return the refreshed note.

        Raises EntityNotFoundError when the note does not exist for the user.
        """

    @abstractmethod
    async def delete(self, note_id: UUID) -> bool:  # pragma: no cover
        """Delete a note by id. Return True if a row was removed, False otherwise."""
