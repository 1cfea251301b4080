"""Tests for profile bootstrap and starter content provisioning."""

import asyncio
from uuid import UUID

from notesync.core.schemas.auth import AuthUser
from notesync.core.services.bootstrap_service import STARTER_FOLDERS, STARTER_NOTES, STARTER_TAGS


def as_auth_user(user) -> AuthUser:
    return AuthUser(id=UUID(user.id), email=user.email)


class TestProvisioning:
    """Test the first-login scenario and its repeats."""

    async def test_first_login(self, bootstrap, repos, db, user):
        """A new user gets a profile, starter folders, tags and notes."""
        result = await bootstrap.handle_auth_event(as_auth_user(user))

        assert result.provisioned is True
        assert result.error is None
        assert result.created_folders == len(STARTER_FOLDERS)
        assert result.created_tags == len(STARTER_TAGS)
        assert result.created_notes == len(STARTER_NOTES)

        profile = await repos.profiles.get()
        assert profile.name == "ada"
        assert profile.starter_content_provisioned is True

        notes = {n.title: n for n in await repos.notes.list()}
        folders = {f.id: f.name for f in await repos.folders.list()}
        tags = {t.id: t.name for t in await repos.tags.list()}
        welcome = notes["Welcome to Your Notes!"]
        assert welcome.is_pinned is True
        assert folders[welcome.folder_id] == "Personal"
        assert [tags[t] for t in welcome.tag_ids] == ["important"]
        meeting = notes["Meeting Notes - Q1 Planning"]
        assert sorted(tags[t] for t in meeting.tag_ids) == ["meeting", "project"]

    async def test_second_login_is_noop(self, bootstrap, db, user):
        """Once provisioned, later events create nothing."""
        await bootstrap.handle_auth_event(as_auth_user(user))
        inserts = db.count("notes", "insert")

        result = await bootstrap.handle_auth_event(as_auth_user(user))

        assert result.provisioned is True
        assert result.created_notes == 0
        assert db.count("notes", "insert") == inserts

    async def test_concurrent_events_share_one_run(self, bootstrap, db, user):
        """Overlapping auth events provision exactly once."""
        auth_user = as_auth_user(user)

        results = await asyncio.gather(
            bootstrap.handle_auth_event(auth_user),
            bootstrap.handle_auth_event(auth_user),
            bootstrap.ensure_provisioned(auth_user),
        )

        assert all(r.provisioned for r in results)
        assert len(db.rows("folders")) == len(STARTER_FOLDERS)
        assert len(db.rows("notes")) == len(STARTER_NOTES)
        assert len(db.rows("profiles")) == 1
        assert not bootstrap.in_flight(auth_user.id)

    async def test_partial_failure_is_retried(self, bootstrap, repos, db, user):
        """A failed step leaves the flag unset and the retry fills the gaps."""
        db.fail("notes", "insert")

        failed = await bootstrap.handle_auth_event(as_auth_user(user))

        assert failed.provisioned is False
        assert failed.error
        assert (await repos.profiles.get()).starter_content_provisioned is False

        retried = await bootstrap.handle_auth_event(as_auth_user(user))

        assert retried.provisioned is True
        assert retried.created_folders == 0
        assert retried.created_tags == 0
        assert retried.created_notes == len(STARTER_NOTES)
        assert len(db.rows("folders")) == len(STARTER_FOLDERS)

    async def test_existing_items_are_kept(self, bootstrap, repos, db, user):
        """Starter items the user already has are not duplicated."""
        db.seed("folders", user_id=user.id, name="Work", color="#000000")
        db.seed("tags", user_id=user.id, name="Draft", color="#000000")

        result = await bootstrap.handle_auth_event(as_auth_user(user))

        assert result.created_folders == len(STARTER_FOLDERS) - 1
        assert result.created_tags == len(STARTER_TAGS) - 1
        assert [f.color for f in await repos.folders.list() if f.name == "Work"] == ["#000000"]

    async def test_profile_created_elsewhere(self, bootstrap, repos, db, user):
        """A profile inserted by another session is re-read instead of failing."""
        db.fail(
            "profiles",
            "insert",
            code="23505",
            side_effect=lambda: db.tables["profiles"].append(
                {
                    "id": user.id,
                    "name": "other device",
                    "email": user.email,
                    "starter_content_provisioned": True,
                    "created_at": db.now(),
                    "updated_at": db.now(),
                }
            ),
        )

        result = await bootstrap.handle_auth_event(as_auth_user(user))

        assert result.provisioned is True
        assert result.created_folders == 0
        assert (await repos.profiles.get()).name == "other device"

    async def test_signed_out_event(self, bootstrap):
        """Sign-out events carry no user and do nothing."""
        assert await bootstrap.handle_auth_event(None) is None

    async def test_failure_never_raises(self, bootstrap, supabase):
        """Errors are reported in the result instead of propagating."""
        ghost = AuthUser(id=UUID(int=1), email="ghost@example.com")

        result = await bootstrap.handle_auth_event(ghost)

        assert result.provisioned is False
        assert "not authenticated" in result.error
