from __future__ import annotations

from typing import TYPE_CHECKING

from notesync.core.schemas.ui import Theme, UIState, ViewMode
from notesync.core.stores.base import Observable

if TYPE_CHECKING:
    from uuid import UUID

    from notesync.db.cache import LocalCache


class UIStore(Observable):
    """Transient selection state.

    The folder filter and the tag filters are mutually exclusive: selecting one
    clears the other. Only the theme survives a restart, through the local cache.
    """

    def __init__(self, cache: LocalCache | None = None) -> None:
        super().__init__()
        self._cache = cache
        self._state = UIState()
        if cache is not None:
            stored = cache.get().theme
            if stored in {t.value for t in Theme}:
                self._state.theme = Theme(stored)

    @property
    def state(self) -> UIState:
        return self._state.model_copy(deep=True)

    @property
    def selected_folder(self) -> UUID | None:
        return self._state.selected_folder

    @property
    def selected_tags(self) -> list[UUID]:
        return list(self._state.selected_tags)

    @property
    def search_query(self) -> str:
        return self._state.search_query

    def set_theme(self, theme: Theme | str) -> None:
        self._state.theme = Theme(theme)
        if self._cache is not None:
            self._cache.update(theme=self._state.theme.value)
        self._notify()

    def toggle_theme(self) -> Theme:
        self.set_theme(Theme.DARK if self._state.theme is Theme.LIGHT else Theme.LIGHT)
        return self._state.theme

    def set_sidebar_open(self, is_open: bool) -> None:
        self._state.sidebar_open = is_open
        self._notify()

    def set_search_query(self, query: str) -> None:
        self._state.search_query = query
        self._notify()

    def set_selected_folder(self, folder_id: UUID | None) -> None:
        self._state.selected_folder = folder_id
        self._state.selected_tags = []
        self._notify()

    def set_selected_tags(self, tag_ids: list[UUID]) -> None:
        self._state.selected_tags = list(dict.fromkeys(tag_ids))
        if self._state.selected_tags:
            self._state.selected_folder = None
        self._notify()

    def toggle_tag(self, tag_id: UUID) -> None:
        tags = self._state.selected_tags
        self._state.selected_tags = [t for t in tags if t != tag_id] if tag_id in tags else [*tags, tag_id]
        self._state.selected_folder = None
        self._notify()

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self._state.view_mode = ViewMode(mode)
        self._notify()

    def clear_filters(self) -> None:
        self._state.search_query = ""
        self._state.selected_folder = None
        self._state.selected_tags = []
        self._notify()
