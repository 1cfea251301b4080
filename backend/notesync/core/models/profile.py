from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from pydantic import Field

from .base import TimestampedModel


class Profile(TimestampedModel):
    """Per-user profile row; tracks whether starter content was provisioned."""

    id: UUID
    name: str = "User"
    email: str | None = None
    starter_content_provisioned: bool = Field(default=False)
