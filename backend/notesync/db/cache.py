from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from notesync.core.models.base import utcnow
from notesync.core.schemas.cache import CacheSnapshot
from notesync.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CACHE_KEY = "note-app-data"


class LocalCache:
    """Single JSON slot holding the last known snapshot of all entities.

    Reads never raise: a missing or corrupt slot yields an empty snapshot.
    Writes are best effort and only log on failure.
    """

    def __init__(self, directory: Path | str, key: str = DEFAULT_CACHE_KEY) -> None:
        self._path = Path(directory) / f"{key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> CacheSnapshot:
        if not self._path.exists():
            return CacheSnapshot()
        try:
            return CacheSnapshot.model_validate_json(self._path.read_bytes())
        except (OSError, ValidationError) as err:
            logger.error("Failed to parse cached data: %s", err)
            return CacheSnapshot()

    def set(self, snapshot: CacheSnapshot) -> CacheSnapshot:
        stamped = snapshot.model_copy(update={"last_sync": utcnow()})
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            tmp_path.write_text(stamped.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as err:
            logger.error("Failed to cache data: %s", err)
        return stamped

    def update(self, **changes: Any) -> CacheSnapshot:
        current = self.get()
        return self.set(current.model_copy(update=changes))

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as err:
            logger.error("Failed to clear cached data: %s", err)
