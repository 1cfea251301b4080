from __future__ import annotations

from typing import Any

from notesync.core.models.profile import Profile
from notesync.core.repositories.implementations.supabase.base import SupabaseRepository
from notesync.core.repositories.profile_repository import ProfileRepository
from notesync.errors import EntityNotFoundError


class SupabaseProfileRepository(SupabaseRepository, ProfileRepository):
    """Supabase implementation of the ProfileRepository.

    The `profiles` row shares its primary key with the auth user id.
    """

    TABLE_NAME = "profiles"
    ENTITY = "Profile"

    async def get(self) -> Profile | None:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_profile(items[0])

    async def create(self, *, name: str, email: str | None) -> Profile:
        user_id = await self._current_user_id()
        row = {"id": user_id, "name": name, "email": email}
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME).insert(row).execute()
        )
        return self._row_to_profile(self._first(resp.data))

    async def mark_starter_content_provisioned(self) -> Profile:
        user_id = await self._current_user_id()
        resp = await self._execute(
            lambda: self._client.table(self.TABLE_NAME)
            .update({"starter_content_provisioned": True})
            .eq("id", user_id)
            .execute(),
            entity_id=user_id,
        )
        items = resp.data or []
        if not items:
            raise EntityNotFoundError(self.ENTITY, user_id)
        return self._row_to_profile(items[0])

    @staticmethod
    def _row_to_profile(row: dict[str, Any]) -> Profile:
        return Profile.model_validate(
            {
                "id": row["id"],
                "name": row.get("name") or "User",
                "email": row.get("email"),
                "starter_content_provisioned": bool(row.get("starter_content_provisioned")),
                "created_at": row["created_at"],
                "updated_at": row.get("updated_at") or row["created_at"],
            }
        )
