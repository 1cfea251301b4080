from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import Field

from notesync.core.models.base import AppBaseModel, utcnow
from notesync.core.models.folder import Folder  # noqa: TCH001
from notesync.core.models.note import Note  # noqa: TCH001
from notesync.core.models.tag import Tag  # noqa: TCH001


class CachedUser(AppBaseModel):
    id: str
    name: str
    email: str
    avatar: str | None = None


class CacheSnapshot(AppBaseModel):
    """Full local copy of the user's entities plus the last sync time."""

    user: CachedUser | None = None
    notes: list[Note] = Field(default_factory=list)
    folders: list[Folder] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    theme: str | None = None
    last_sync: datetime = Field(default_factory=utcnow)
