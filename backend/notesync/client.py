from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from notesync.config import Settings
from notesync.config import settings as default_settings
from notesync.core.repositories.implementations.local.folder_repository import LocalFolderRepository
from notesync.core.repositories.implementations.local.note_repository import LocalNoteRepository
from notesync.core.repositories.implementations.local.tag_repository import LocalTagRepository
from notesync.core.repositories.implementations.supabase.folder_repository import SupabaseFolderRepository
from notesync.core.repositories.implementations.supabase.note_repository import SupabaseNoteRepository
from notesync.core.repositories.implementations.supabase.profile_repository import SupabaseProfileRepository
from notesync.core.repositories.implementations.supabase.tag_repository import SupabaseTagRepository
from notesync.core.schemas.cache import CachedUser
from notesync.core.services.account_service import AccountService
from notesync.core.services.auth_service import AuthService
from notesync.core.services.autosave import NoteAutosaver
from notesync.core.services.bootstrap_service import ProfileBootstrap
from notesync.core.services.export_service import ExportService
from notesync.core.services.workspace import Workspace
from notesync.core.stores.folders import FolderStore
from notesync.core.stores.notes import NoteStore
from notesync.core.stores.tags import TagStore
from notesync.core.stores.ui import UIStore
from notesync.db.base import create_user_supabase_client
from notesync.db.cache import LocalCache
from notesync.errors import NotesyncError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    import httpx

    from notesync.core.schemas.auth import AuthSession, AuthUser, SignUpResult

logger = get_logger(__name__)


@dataclass
class NotesClient:
    """Everything the application needs, wired for one storage mode.

    ``auth``, ``bootstrap`` and ``account`` are only present in remote mode;
    cache-only mode has no users.
    """

    settings: Settings
    cache: LocalCache
    workspace: Workspace
    autosaver: NoteAutosaver
    exports: ExportService
    auth: AuthService | None = None
    bootstrap: ProfileBootstrap | None = None
    account: AccountService | None = None

    @property
    def is_remote(self) -> bool:
        return self.auth is not None

    async def start(self) -> AuthSession | None:
        """Restore a persisted session (remote) or read the cache (local) and load the stores."""
        if self.auth is None:
            await self.workspace.load_all()
            return None
        session = await self.auth.restore_session()
        if session is not None:
            self._remember(session.user)
            await self.workspace.load_all()
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        auth = self._require_auth()
        session = await auth.sign_in(email, password)
        self._remember(session.user)
        await self.workspace.load_all()
        return session

    async def sign_up(self, email: str, password: str) -> SignUpResult:
        auth = self._require_auth()
        result = await auth.sign_up(email, password)
        if result.session is not None:
            self._remember(result.session.user)
            await self.workspace.load_all()
        return result

    async def sign_out(self) -> None:
        auth = self._require_auth()
        await self.autosaver.flush()
        await auth.sign_out()
        self.workspace.reset()
        self.cache.update(user=None)

    async def delete_account(self) -> None:
        if self.account is None:
            raise NotesyncError("Account deletion requires remote mode")
        self.autosaver.cancel_all()
        await self.account.delete_account()

    async def close(self) -> None:
        """Write out any pending edits."""
        await self.autosaver.flush()

    def _remember(self, user: AuthUser) -> None:
        name = user.email.split("@")[0] if user.email else "User"
        self.cache.update(user=CachedUser(id=str(user.id), name=name, email=user.email))

    def _require_auth(self) -> AuthService:
        if self.auth is None:
            raise NotesyncError("Authentication is not available in local mode")
        return self.auth


def build_client(
    settings: Settings | None = None,
    *,
    supabase_client: Any = None,
    http_client: httpx.AsyncClient | None = None,
) -> NotesClient:
    settings = settings or default_settings
    cache = LocalCache(settings.cache_dir, settings.cache_key)

    if settings.mode == "local":
        logger.info("Using local cache as system of record", extra={"path": str(cache.path)})
        notes = NoteStore(LocalNoteRepository(cache))
        workspace = Workspace(
            notes=notes,
            folders=FolderStore(LocalFolderRepository(cache)),
            tags=TagStore(LocalTagRepository(cache)),
            ui=UIStore(cache),
        )
        return NotesClient(
            settings=settings,
            cache=cache,
            workspace=workspace,
            autosaver=_autosaver(notes, settings),
            exports=ExportService(notes, cache),
        )

    supabase = supabase_client if supabase_client is not None else create_user_supabase_client()
    note_repo = SupabaseNoteRepository(supabase)
    folder_repo = SupabaseFolderRepository(supabase)
    tag_repo = SupabaseTagRepository(supabase)

    notes = NoteStore(note_repo)
    workspace = Workspace(
        notes=notes,
        folders=FolderStore(folder_repo),
        tags=TagStore(tag_repo),
        ui=UIStore(cache),
    )
    bootstrap = ProfileBootstrap(SupabaseProfileRepository(supabase), folder_repo, tag_repo, note_repo)
    auth = AuthService(supabase, bootstrap)
    account = AccountService(
        auth,
        workspace,
        deletion_url=settings.account_deletion_url,
        cache=cache,
        timeout=settings.account_deletion_timeout,
        http_client=http_client,
    )
    return NotesClient(
        settings=settings,
        cache=cache,
        workspace=workspace,
        autosaver=_autosaver(notes, settings),
        exports=ExportService(notes),
        auth=auth,
        bootstrap=bootstrap,
        account=account,
    )


def _autosaver(notes: NoteStore, settings: Settings) -> NoteAutosaver:
    return NoteAutosaver(
        notes,
        title_delay=settings.autosave_title_delay,
        content_delay=settings.autosave_content_delay,
    )
