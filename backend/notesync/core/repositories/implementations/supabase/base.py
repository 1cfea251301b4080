from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from postgrest.exceptions import APIError

from notesync.errors import (
    BackendError,
    ConflictError,
    EntityNotFoundError,
    NotesyncError,
    UnauthenticatedError,
)
from notesync.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import Client

# Postgres constraint violations
_CONFLICT_CODES = {"23505", "23503"}
# PostgREST rejected the bearer token
_AUTH_CODES = {"PGRST301", "PGRST302"}
# `.single()` matched no rows
_NO_ROWS_CODE = "PGRST116"


def translate_api_error(
    err: APIError,
    *,
    entity: str = "Row",
    entity_id: Any = None,
) -> NotesyncError:
    """Map a PostgREST error onto the notesync error taxonomy."""
    code = getattr(err, "code", None)
    message = getattr(err, "message", None) or str(err)
    if code in _CONFLICT_CODES:
        return ConflictError(message, details={"code": code})
    if code in _AUTH_CODES:
        return UnauthenticatedError(message)
    if code == _NO_ROWS_CODE:
        return EntityNotFoundError(entity, entity_id)
    return BackendError(message, details={"code": code})


class SupabaseRepository:
    """Shared plumbing for Supabase-backed repositories.

    The supabase-py client is synchronous, so every call is pushed to a worker
    thread. The authenticated user is read from the client's locally held
    session on each operation and used to scope every query; the auth server
    is only consulted when no session is held.
    """

    ENTITY = "Row"

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    async def _current_user_id(self) -> str:
        try:
            resp = await self._run(self._client.auth.get_session)
            if resp is None:
                # No cached session, ask the auth server
                resp = await self._run(self._client.auth.get_user)
        except Exception as err:
            logger.warning(
                "Session lookup failed",
                extra={"error_type": type(err).__name__},
            )
            raise UnauthenticatedError() from err
        user = getattr(resp, "user", None) if resp else None
        user_id = getattr(user, "id", None)
        if not user_id:
            raise UnauthenticatedError()
        return str(user_id)

    async def _execute(self, func: Callable[[], Any], *, entity_id: Any = None) -> Any:
        try:
            return await self._run(func)
        except APIError as err:
            logger.warning(
                "%s request rejected by backend: %s",
                self.ENTITY,
                getattr(err, "message", err),
                extra={"code": getattr(err, "code", None)},
            )
            raise translate_api_error(err, entity=self.ENTITY, entity_id=entity_id) from err
        except NotesyncError:
            raise
        except Exception as err:
            logger.error("%s request failed: %s", self.ENTITY, err)
            raise BackendError(f"{self.ENTITY} request failed: {err}") from err

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}
