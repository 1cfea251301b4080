from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field

from .base import TimestampedModel

# Palette used when a tag is created without an explicit color
TAG_COLORS = [
    "#ef4444",  # red
    "#f97316",  # orange
    "#eab308",  # yellow
    "#22c55e",  # green
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#f59e0b",  # amber
    "#10b981",  # emerald
]


class Tag(TimestampedModel):
    """Tag domain model."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=50)
    color: str = TAG_COLORS[0]
