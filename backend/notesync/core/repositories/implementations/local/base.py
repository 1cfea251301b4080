from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notesync.db.cache import LocalCache


class LocalRepository:
    """Repository whose system of record is the local cache snapshot.

    Used in cache-only mode: identifiers and timestamps are assigned here, and
    every mutation writes the full snapshot back.
    """

    def __init__(self, cache: LocalCache) -> None:
        self._cache = cache
