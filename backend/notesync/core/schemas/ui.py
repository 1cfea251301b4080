from __future__ import annotations

from enum import Enum
from uuid import UUID  # noqa: TCH003

from pydantic import Field

from notesync.core.models.base import AppBaseModel


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ViewMode(str, Enum):
    LIST = "list"
    GRID = "grid"


class UIState(AppBaseModel):
    """Transient selection state; never persisted remotely."""

    theme: Theme = Theme.LIGHT
    sidebar_open: bool = True
    search_query: str = ""
    selected_folder: UUID | None = None
    selected_tags: list[UUID] = Field(default_factory=list)
    view_mode: ViewMode = ViewMode.LIST
