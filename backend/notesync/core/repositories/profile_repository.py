from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notesync.core.models.profile import Profile


class ProfileRepository(ABC):
    """Abstract repository interface for the authenticated user's profile."""

    @abstractmethod
    async def get(self) -> Profile | None:  # pragma: no cover - interface only
        """Return the profile of the current user, or None if it does not exist."""

    @abstractmethod
    async def create(self, *, name: str, email: str | None) -> Profile:  # pragma: no cover
        """Create the profile. Raises ConflictError if one already exists."""

    @abstractmethod
    async def mark_starter_content_provisioned(self) -> Profile:  # pragma: no cover
        ...
