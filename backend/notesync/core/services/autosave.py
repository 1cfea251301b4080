from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from notesync.core.schemas.note import NoteUpdate
from notesync.errors import NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Hashable
    from uuid import UUID

    from notesync.core.stores.notes import NoteStore

logger = get_logger(__name__)


class Debouncer:
    """Cancellable delayed actions, at most one live task per key.

    Scheduling a key that already has a pending action cancels it, so only the
    latest action fires once the key has been quiet for its delay.
    """

    def __init__(self, delay: float = 1.0) -> None:
        self._delay = delay
        self._tasks: dict[Hashable, asyncio.Task[Any]] = {}
        self._actions: dict[Hashable, Callable[[], Awaitable[Any]]] = {}

    def schedule(
        self,
        key: Hashable,
        action: Callable[[], Awaitable[Any]],
        delay: float | None = None,
    ) -> asyncio.Task[Any]:
        self.cancel(key)
        wait = self._delay if delay is None else delay
        task = asyncio.create_task(self._run_later(key, action, wait))
        self._tasks[key] = task
        self._actions[key] = action
        return task

    def pending(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def cancel(self, key: Hashable) -> bool:
        self._actions.pop(key, None)
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self._tasks):
            self.cancel(key)

    async def flush(self) -> None:
        """Run every pending action now instead of waiting for its delay."""
        actions = list(self._actions.values())
        self.cancel_all()
        for action in actions:
            await action()

    async def _run_later(
        self,
        key: Hashable,
        action: Callable[[], Awaitable[Any]],
        delay: float,
    ) -> None:
        await asyncio.sleep(delay)
        # Past this point the action is no longer cancellable by a reschedule
        if self._tasks.get(key) is asyncio.current_task():
            del self._tasks[key]
            self._actions.pop(key, None)
        await action()


class SaveStatus(str, Enum):
    SAVED = "saved"
    UNSAVED = "unsaved"
    SAVING = "saving"


class NoteAutosaver:
    """Debounced title/content writes for the note being edited.

    Each (note id, field) pair has its own timer; every keystroke resets it and
    a single write with the latest value fires once typing pauses.
    """

    def __init__(
        self,
        notes: NoteStore,
        debouncer: Debouncer | None = None,
        *,
        title_delay: float = 1.0,
        content_delay: float = 2.0,
    ) -> None:
        self._notes = notes
        self._debouncer = debouncer or Debouncer()
        self._delays = {"title": title_delay, "content": content_delay}
        self._status: dict[UUID, SaveStatus] = {}

    def status(self, note_id: UUID) -> SaveStatus:
        return self._status.get(note_id, SaveStatus.SAVED)

    def title_changed(self, note_id: UUID, title: str) -> None:
        self._schedule(note_id, "title", title)

    def content_changed(self, note_id: UUID, content: str) -> None:
        self._schedule(note_id, "content", content)

    def pending(self, note_id: UUID) -> bool:
        return any(self._debouncer.pending((note_id, field)) for field in self._delays)

    def discard(self, note_id: UUID) -> None:
        """Drop pending writes, e.g. when the note is deleted."""
        for field in self._delays:
            self._debouncer.cancel((note_id, field))
        self._status.pop(note_id, None)

    def cancel_all(self) -> None:
        self._debouncer.cancel_all()
        self._status.clear()

    async def flush(self) -> None:
        await self._debouncer.flush()

    def _schedule(self, note_id: UUID, field: str, value: str) -> None:
        self._status[note_id] = SaveStatus.UNSAVED

        async def save() -> None:
            await self._save(note_id, field, value)

        self._debouncer.schedule((note_id, field), save, delay=self._delays[field])

    async def _save(self, note_id: UUID, field: str, value: str) -> None:
        self._status[note_id] = SaveStatus.SAVING
        try:
            await self._notes.update(note_id, NoteUpdate.model_validate({field: value}))
        except (NotesyncError, ValidationError) as err:
            logger.error("Failed to save %s for note %s: %s", field, note_id, err)
            self._status[note_id] = SaveStatus.UNSAVED
            return
        if not self.pending(note_id):
            self._status[note_id] = SaveStatus.SAVED
