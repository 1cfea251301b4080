"""Exception hierarchy shared by the gateway, stores and services."""
from __future__ import annotations

from typing import Any


class NotesyncError(Exception):
    """Base class for all notesync errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnauthenticatedError(NotesyncError):
    """Raised when a user-scoped operation runs without a valid session."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class EntityNotFoundError(NotesyncError):
    """The targeted entity is absent from the authoritative collection.

    When raised by a store, ``reload_required`` is set: the local collection is
    stale and the caller should reload it before retrying.
    """

    def __init__(self, entity: str, entity_id: Any, *, reload_required: bool = False) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
        self.reload_required = reload_required


class ConflictError(NotesyncError):
    """Constraint violation reported by the backend (duplicate or foreign key)."""


class BackendError(NotesyncError):
    """Opaque network or backend failure surfaced from the remote gateway."""


class AuthenticationError(NotesyncError):
    """Sign-up, sign-in or session operation rejected by the auth provider."""


class ImportDisabledError(NotesyncError):
    """Import is only available while the local cache is the system of record."""

    def __init__(self) -> None:
        super().__init__("Import is disabled while notes are stored in the remote backend")
