from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from notesync.core.models.base import AppBaseModel
from notesync.core.schemas.folder import FolderCreate
from notesync.core.schemas.note import NoteCreate
from notesync.errors import ConflictError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from notesync.core.models.folder import Folder
    from notesync.core.models.profile import Profile
    from notesync.core.models.tag import Tag
    from notesync.core.repositories.folder_repository import FolderRepository
    from notesync.core.repositories.note_repository import NoteRepository
    from notesync.core.repositories.profile_repository import ProfileRepository
    from notesync.core.repositories.tag_repository import TagRepository
    from notesync.core.schemas.auth import AuthUser

logger = get_logger(__name__)


STARTER_FOLDERS: tuple[tuple[str, str], ...] = (
    ("Personal", "#3b82f6"),
    ("Work", "#22c55e"),
    ("Ideas", "#f59e0b"),
)

STARTER_TAGS: tuple[tuple[str, str], ...] = (
    ("important", "#ef4444"),
    ("draft", "#f97316"),
    ("meeting", "#8b5cf6"),
    ("project", "#22c55e"),
)


@dataclass(frozen=True)
class StarterNote:
    title: str
    content: str
    folder: str
    tags: tuple[str, ...]
    is_pinned: bool = False


STARTER_NOTES: tuple[StarterNote, ...] = (
    StarterNote(
        title="Welcome to Your Notes!",
        content=(
            "<p>Welcome to your new note-taking app!</p>"
            "<p>This is your first note. You can:</p>"
            "<ul><li>Create and edit notes</li><li>Organize with folders</li>"
            "<li>Add tags for better organization</li><li>Pin important notes</li></ul>"
            "<p>Changes are saved automatically while you type.</p>"
        ),
        folder="Personal",
        tags=("important",),
        is_pinned=True,
    ),
    StarterNote(
        title="Meeting Notes - Q1 Planning",
        content=(
            "<h2>Q1 Planning Meeting</h2>"
            "<h3>Key Points</h3><ul><li>Budget allocation for new projects</li>"
            "<li>Timeline for product launch</li><li>Resource planning</li></ul>"
            "<h3>Action Items</h3><ol><li>Review budget proposal</li>"
            "<li>Schedule follow-up meetings</li></ol>"
        ),
        folder="Work",
        tags=("meeting", "project"),
    ),
)


class BootstrapResult(AppBaseModel):
    """Outcome of one provisioning attempt."""

    user_id: UUID
    provisioned: bool
    created_folders: int = 0
    created_tags: int = 0
    created_notes: int = 0
    error: str | None = None


class ProfileBootstrap:
    """Ensures a profile exists and seeds starter content once per user.

    Concurrent calls for the same user share a single in-flight task. Before
    seeding, existing folders, tags and notes are re-read and only missing
    starter items are created, so overlapping sessions cannot duplicate data.
    The profile flag is set only after every step succeeded; a partial failure
    leaves it unset and the next authentication event retries.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        folders: FolderRepository,
        tags: TagRepository,
        notes: NoteRepository,
    ) -> None:
        self._profiles = profiles
        self._folders = folders
        self._tags = tags
        self._notes = notes
        self._in_flight: dict[UUID, asyncio.Task[BootstrapResult]] = {}

    async def handle_auth_event(self, user: AuthUser | None) -> BootstrapResult | None:
        """Entry point for sign-in, sign-up and session restore. Never raises."""
        if user is None:
            return None
        try:
            return await self.ensure_provisioned(user)
        except Exception as err:  # provisioning must not block application usage
            logger.error("Starter content provisioning failed for user %s: %s", user.id, err)
            logger.error("Error type: %s", type(err).__name__)
            return BootstrapResult(user_id=user.id, provisioned=False, error=str(err))

    async def ensure_provisioned(self, user: AuthUser) -> BootstrapResult:
        task = self._in_flight.get(user.id)
        if task is None:
            task = asyncio.create_task(self._provision(user))
            self._in_flight[user.id] = task
            task.add_done_callback(lambda done, user_id=user.id: self._forget(user_id, done))
        else:
            logger.debug("Provisioning already in flight for user %s", user.id)
        return await asyncio.shield(task)

    def in_flight(self, user_id: UUID) -> bool:
        return user_id in self._in_flight

    def _forget(self, user_id: UUID, task: asyncio.Task[BootstrapResult]) -> None:
        if self._in_flight.get(user_id) is task:
            del self._in_flight[user_id]

    async def _provision(self, user: AuthUser) -> BootstrapResult:
        profile = await self._ensure_profile(user)
        if profile.starter_content_provisioned:
            logger.debug("Starter content already provisioned for user %s", user.id)
            return BootstrapResult(user_id=user.id, provisioned=True)

        logger.info("Provisioning starter content for user %s", user.id)
        folders, created_folders = await self._ensure_folders()
        tags, created_tags = await self._ensure_tags()
        created_notes = await self._ensure_notes(folders, tags)

        await self._profiles.mark_starter_content_provisioned()
        logger.info(
            "Starter content provisioned for user %s",
            user.id,
            extra={
                "folders": created_folders,
                "tags": created_tags,
                "notes": created_notes,
            },
        )
        return BootstrapResult(
            user_id=user.id,
            provisioned=True,
            created_folders=created_folders,
            created_tags=created_tags,
            created_notes=created_notes,
        )

    async def _ensure_profile(self, user: AuthUser) -> Profile:
        profile = await self._profiles.get()
        if profile is not None:
            return profile

        name = (user.email.split("@")[0] if user.email else "") or "User"
        try:
            profile = await self._profiles.create(name=name, email=user.email or None)
        except ConflictError:
            # Another session inserted the row first
            logger.info("Profile for user %s already exists; re-reading", user.id)
            profile = await self._profiles.get()
            if profile is None:
                raise
            return profile
        logger.info("User profile created", extra={"user_id": str(user.id)})
        return profile

    async def _ensure_folders(self) -> tuple[dict[str, Folder], int]:
        by_name = {f.name: f for f in await self._folders.list()}
        created = 0
        for name, color in STARTER_FOLDERS:
            if name not in by_name:
                by_name[name] = await self._folders.create(FolderCreate(name=name, color=color))
                created += 1
        return by_name, created

    async def _ensure_tags(self) -> tuple[dict[str, Tag], int]:
        by_name = {t.name.lower(): t for t in await self._tags.list()}
        created = 0
        for name, color in STARTER_TAGS:
            if name not in by_name:
                by_name[name] = await self._tags.create(name=name, color=color)
                created += 1
        return by_name, created

    async def _ensure_notes(self, folders: dict[str, Folder], tags: dict[str, Tag]) -> int:
        titles = {n.title for n in await self._notes.list()}
        created = 0
        for starter in STARTER_NOTES:
            if starter.title in titles:
                continue
            await self._notes.create(
                NoteCreate(
                    title=starter.title,
                    content=starter.content,
                    folder_id=folders[starter.folder].id,
                    tag_ids=[tags[name].id for name in starter.tags],
                    is_pinned=starter.is_pinned,
                )
            )
            created += 1
        return created
