from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from pydantic import Field

from notesync.core.models.base import AppBaseModel
from notesync.errors import BackendError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from supabase import Client


logger = get_logger(__name__)


class AccountDeletionResult(AppBaseModel):
    success: bool
    message: str
    failed_steps: list[str] = Field(default_factory=list)


class AccountDeletionService:
    """Deletes a user and all of their data with the service-role client.

    Rows go in foreign-key dependency order: note_tags, notes, folders, tags,
    profile, then the auth identity. A failing table step is logged and the
    cascade continues; only a failure to delete the auth identity fails the
    whole operation.
    """

    def __init__(self, admin_client: Client) -> None:
        self._client = admin_client

    async def delete_user(self, user_id: UUID) -> AccountDeletionResult:
        uid = str(user_id)
        failed: list[str] = []
        logger.info("Deleting user %s", uid)

        steps: list[tuple[str, Callable[[], Any]]] = [
            ("note_tags", lambda: self._delete_note_links(uid)),
            ("notes", lambda: self._client.table("notes").delete().eq("user_id", uid).execute()),
            ("folders", lambda: self._client.table("folders").delete().eq("user_id", uid).execute()),
            ("tags", lambda: self._client.table("tags").delete().eq("user_id", uid).execute()),
            ("profiles", lambda: self._client.table("profiles").delete().eq("id", uid).execute()),
        ]
        for index, (name, step) in enumerate(steps, start=1):
            logger.info("%d. Deleting %s...", index, name)
            try:
                await asyncio.to_thread(step)
            except Exception as err:  # keep going; remaining rows still belong to the user
                logger.error("Error deleting %s for user %s: %s", name, uid, err)
                failed.append(name)

        logger.info("%d. Deleting auth user...", len(steps) + 1)
        try:
            await asyncio.to_thread(lambda: self._client.auth.admin.delete_user(uid))
        except Exception as err:
            logger.error("Error deleting auth user %s: %s", uid, err)
            raise BackendError(
                "Failed to delete user",
                details={"reason": str(err), "failed_steps": failed},
            ) from err

        logger.info("User deletion completed", extra={"user_id": uid, "failed_steps": failed})
        return AccountDeletionResult(
            success=True,
            message="User and all related data deleted successfully",
            failed_steps=failed,
        )

    def _delete_note_links(self, uid: str) -> Any:
        resp = self._client.table("notes").select("id").eq("user_id", uid).execute()
        note_ids = [row["id"] for row in resp.data or []]
        if not note_ids:
            return None
        return self._client.table("note_tags").delete().in_("note_id", note_ids).execute()
