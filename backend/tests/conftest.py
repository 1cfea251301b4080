"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest
from fakes import FakeSupabase

from notesync.core.repositories.implementations.supabase.folder_repository import SupabaseFolderRepository
from notesync.core.repositories.implementations.supabase.note_repository import SupabaseNoteRepository
from notesync.core.repositories.implementations.supabase.profile_repository import SupabaseProfileRepository
from notesync.core.repositories.implementations.supabase.tag_repository import SupabaseTagRepository
from notesync.core.services.bootstrap_service import ProfileBootstrap
from notesync.core.services.workspace import Workspace
from notesync.core.stores.folders import FolderStore
from notesync.core.stores.notes import NoteStore
from notesync.core.stores.tags import TagStore
from notesync.core.stores.ui import UIStore
from notesync.db.cache import LocalCache


@pytest.fixture
def supabase():
    """Fake Supabase client with no active session."""
    return FakeSupabase()


@pytest.fixture
def db(supabase):
    return supabase.db


@pytest.fixture
def user(supabase):
    """Signed-in user."""
    return supabase.auth.login("ada@example.com")


@pytest.fixture
def repos(supabase):
    return SimpleNamespace(
        notes=SupabaseNoteRepository(supabase),
        folders=SupabaseFolderRepository(supabase),
        tags=SupabaseTagRepository(supabase),
        profiles=SupabaseProfileRepository(supabase),
    )


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path, "note-app-data")


@pytest.fixture
def workspace(repos):
    return Workspace(
        notes=NoteStore(repos.notes),
        folders=FolderStore(repos.folders),
        tags=TagStore(repos.tags),
        ui=UIStore(),
    )


@pytest.fixture
def bootstrap(repos):
    return ProfileBootstrap(repos.profiles, repos.folders, repos.tags, repos.notes)
