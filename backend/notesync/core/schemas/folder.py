from __future__ import annotations

from pydantic import Field, field_validator

from notesync.core.models.base import AppBaseModel
from notesync.core.models.folder import DEFAULT_FOLDER_COLOR


def _normalize_name(v: str) -> str:
    name = v.strip()
    if not name:
        raise ValueError("Name must be non-empty")
    return name


class FolderCreate(AppBaseModel):
    name: str = Field(max_length=255)
    color: str = DEFAULT_FOLDER_COLOR

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _normalize_name(v)


class FolderUpdate(AppBaseModel):
    name: str | None = Field(default=None, max_length=255)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Name cannot be null")
        return _normalize_name(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
