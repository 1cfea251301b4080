from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field

from .base import TimestampedModel

DEFAULT_FOLDER_COLOR = "#3b82f6"


class Folder(TimestampedModel):
    """Folder domain model."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=255)
    color: str = DEFAULT_FOLDER_COLOR
