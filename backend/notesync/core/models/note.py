from __future__ import annotations

import re
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel

_TAG_RE = re.compile(r"<[^>]+>")


def dedupe_ids(values: list[UUID]) -> list[UUID]:
    """Drop repeated ids while keeping the first occurrence order."""
    seen: list[UUID] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class Note(TimestampedModel):
    """Note domain model."""

    id: UUID = Field(default_factory=uuid4, description="Unique note identifier")
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Rich-text HTML content")
    folder_id: UUID | None = Field(default=None, description="Containing folder, if any")
    tag_ids: list[UUID] = Field(default_factory=list, description="Associated tags")
    is_pinned: bool = Field(default=False, description="Whether note is pinned")

    @field_validator("tag_ids")
    @classmethod
    def validate_tag_ids(cls, v: list[UUID]) -> list[UUID]:
        return dedupe_ids(v)

    @property
    def plain_text(self) -> str:
        """Content with markup stripped, used for search."""
        return _TAG_RE.sub(" ", self.content)
