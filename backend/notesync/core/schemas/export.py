from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from notesync.core.models.base import AppBaseModel, utcnow
from notesync.core.models.note import Note

EXPORT_VERSION = "1.0"


class ExportedNote(Note):
    """Note as written to a backup file, with camelCase keys (``folderId``, ``tagIds``)."""

    model_config = ConfigDict(alias_generator=to_camel)

    @classmethod
    def from_note(cls, note: Note) -> ExportedNote:
        return cls.model_validate(note.model_dump())

    def to_note(self) -> Note:
        return Note.model_validate(self.model_dump())


class NotesExport(AppBaseModel):
    """JSON document produced by a note collection export.

    Every key is camelCase. Snake_case keys are still accepted on import.
    """

    model_config = ConfigDict(alias_generator=to_camel)

    notes: list[ExportedNote] = Field(default_factory=list)
    exported_at: datetime = Field(default_factory=utcnow)
    version: str = EXPORT_VERSION
