from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from notesync.errors import EntityNotFoundError, NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

logger = get_logger(__name__)

T = TypeVar("T")


class StoreStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"


class Observable:
    """Minimal change notification shared by all stores."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[], None]] = []

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a listener called after every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class EntityStore(Observable, Generic[T]):
    """In-memory collection of one entity type mediating between UI and gateway.

    Local state changes only after the remote call resolves. Mutations that
    target an id missing from memory raise EntityNotFoundError with
    ``reload_required`` set; the store never reloads on its own.
    """

    ENTITY = "Entity"

    def __init__(self) -> None:
        super().__init__()
        self._items: list[Any] = []
        self._status = StoreStatus.IDLE

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def status(self) -> StoreStatus:
        return self._status

    def get(self, entity_id: UUID) -> T | None:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    async def load(self) -> list[T]:
        """Replace the whole collection with the gateway listing."""
        self._status = StoreStatus.LOADING
        self._notify()
        try:
            fetched = await self._fetch_all()
        except NotesyncError as err:
            logger.error("Failed to load %s collection: %s", self.ENTITY.lower(), err)
            raise
        else:
            self._items = list(fetched)
            self._after_load()
        finally:
            self._status = StoreStatus.IDLE
            self._notify()
        return self.items

    def reset(self) -> None:
        self._items = []
        self._status = StoreStatus.IDLE
        self._notify()

    async def _fetch_all(self) -> Sequence[T]:  # pragma: no cover - overridden
        raise NotImplementedError

    def _after_load(self) -> None:
        pass

    def _require(self, entity_id: UUID) -> T:
        item = self.get(entity_id)
        if item is None:
            raise EntityNotFoundError(self.ENTITY, entity_id, reload_required=True)
        return item

    def _replace(self, entity: T) -> None:
        for index, item in enumerate(self._items):
            if item.id == entity.id:
                self._items[index] = entity
                return
        logger.debug("%s %s left the collection before its update resolved", self.ENTITY, entity.id)

    def _remove(self, entity_id: UUID) -> None:
        self._items = [item for item in self._items if item.id != entity_id]

    @staticmethod
    def _diff(current: Any, changes: dict) -> dict:
        """Keep only the fields whose value differs from the current entity."""
        return {key: value for key, value in changes.items() if getattr(current, key) != value}
