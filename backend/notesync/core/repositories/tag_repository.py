from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notesync.core.models.tag import Tag


class TagRepository(ABC):
    """Abstract repository interface for tags.

    ``create`` receives a resolved color; palette assignment happens in the store.
    """

    @abstractmethod
    async def list(self) -> Sequence[Tag]:  # pragma: no cover - interface only
        """Return the user's tags ordered by name."""

    @abstractmethod
    async def create(self, *, name: str, color: str) -> Tag:  # pragma: no cover
        ...

    @abstractmethod
    async def update(self, tag_id: UUID, changes: dict) -> Tag:  # pragma: no cover
        ...

    @abstractmethod
    async def delete(self, tag_id: UUID) -> bool:  # pragma: no cover
        ...
