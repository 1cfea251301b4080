from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from notesync.core.models.base import utcnow
from notesync.core.schemas.export import ExportedNote, NotesExport
from notesync.errors import ImportDisabledError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from notesync.core.stores.notes import NoteStore
    from notesync.db.cache import LocalCache

logger = get_logger(__name__)


class ExportService:
    """Download the note collection as JSON and, in cache-only mode, import it back.

    Import is only wired when a local cache is the system of record; with the
    remote backend authoritative it raises ImportDisabledError.
    """

    def __init__(self, notes: NoteStore, cache: LocalCache | None = None) -> None:
        self._notes = notes
        self._cache = cache

    @property
    def import_enabled(self) -> bool:
        return self._cache is not None

    def build_export(self) -> NotesExport:
        return NotesExport(notes=[ExportedNote.from_note(note) for note in self._notes.notes])

    def export_to_file(self, directory: Path | str) -> Path:
        export = self.build_export()
        target = Path(directory) / f"notes-backup-{export.exported_at.date().isoformat()}.json"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(export.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        logger.info("Exported %d notes to %s", len(export.notes), target)
        return target

    async def import_from_file(self, path: Path | str) -> int:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return await self.import_payload(data)

    async def import_payload(self, data: dict[str, Any] | NotesExport) -> int:
        """Merge exported notes into the cache by id and reload the store."""
        if self._cache is None:
            raise ImportDisabledError()

        export = data if isinstance(data, NotesExport) else NotesExport.model_validate(data)
        snapshot = self._cache.get()
        imported = {note.id: note.to_note() for note in export.notes}
        merged = [imported.pop(note.id, note) for note in snapshot.notes]
        merged.extend(imported.values())
        self._cache.update(notes=merged)
        logger.info(
            "Imported %d notes",
            len(export.notes),
            extra={"exported_at": export.exported_at.isoformat(), "imported_at": utcnow().isoformat()},
        )
        await self._notes.load()
        return len(export.notes)
