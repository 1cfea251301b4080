from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from notesync.core.models.base import AppBaseModel
from notesync.core.models.note import dedupe_ids


class NoteCreate(AppBaseModel):
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Rich-text HTML content")
    folder_id: UUID | None = None
    tag_ids: list[UUID] = Field(default_factory=list)
    is_pinned: bool = False

    @field_validator("tag_ids")
    @classmethod
    def validate_tag_ids(cls, v: list[UUID]) -> list[UUID]:
        return dedupe_ids(v)


class NoteUpdate(AppBaseModel):
    """Partial note update. Only explicitly set fields are dispatched."""

    title: str | None = None
    content: str | None = None
    folder_id: UUID | None = None
    tag_ids: list[UUID] | None = None
    is_pinned: bool | None = None

    @field_validator("tag_ids")
    @classmethod
    def validate_tag_ids(cls, v: list[UUID] | None) -> list[UUID] | None:
        if v is None:
            return v
        return dedupe_ids(v)

    @field_validator("title", "content", "is_pinned")
    @classmethod
    def reject_explicit_null(cls, v):
        # folder_id=None clears the folder; the other fields have no null state
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
