from __future__ import annotations

from pydantic import Field, field_validator

from notesync.core.models.base import AppBaseModel


class TagCreate(AppBaseModel):
    name: str = Field(max_length=50)
    color: str | None = Field(default=None, description="Assigned from the palette when omitted")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Tag name must be non-empty")
        return name


class TagUpdate(AppBaseModel):
    name: str | None = Field(default=None, max_length=50)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            raise ValueError("Tag name must be non-empty")
        return v.strip()

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
