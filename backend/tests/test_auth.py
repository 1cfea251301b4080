"""Tests for the client-side auth service."""

import pytest

from notesync.core.services.auth_service import AuthService
from notesync.errors import AuthenticationError, UnauthenticatedError


@pytest.fixture
def auth(supabase, bootstrap):
    return AuthService(supabase, bootstrap)


class TestSignUp:
    """Test account creation."""

    async def test_short_password(self, auth, supabase):
        """Passwords under six characters are rejected locally."""
        with pytest.raises(AuthenticationError, match="at least 6 characters"):
            await auth.sign_up("new@example.com", "12345")
        assert supabase.auth.users == {}

    async def test_invalid_email(self, auth):
        """Malformed addresses never reach the provider."""
        with pytest.raises(AuthenticationError, match="valid email"):
            await auth.sign_up("not-an-email", "secret123")

    async def test_confirmation_pending(self, auth, supabase, db):
        """Without a session the caller is told to confirm the email."""
        supabase.auth.require_confirmation = True

        result = await auth.sign_up("New@Example.com ", "secret123")

        assert result.email_confirmation_sent is True
        assert result.session is None
        assert result.user.email == "new@example.com"
        assert db.rows("profiles") == []

    async def test_immediate_session_provisions(self, auth, db):
        """A sign-up that signs in right away bootstraps the profile."""
        result = await auth.sign_up("new@example.com", "secret123")

        assert result.email_confirmation_sent is False
        assert result.session.access_token
        assert len(db.rows("profiles")) == 1

    async def test_duplicate_account(self, auth, supabase):
        """Provider errors are turned into readable messages."""
        supabase.auth.register("taken@example.com")

        with pytest.raises(AuthenticationError, match="already exists"):
            await auth.sign_up("taken@example.com", "secret123")


class TestSignIn:
    """Test sign-in and session handling."""

    async def test_wrong_password(self, auth, supabase):
        """Bad credentials map to a generic message."""
        supabase.auth.register("ada@example.com", "secret123")

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await auth.sign_in("ada@example.com", "nope")

    async def test_sign_in_bootstraps(self, auth, supabase, db):
        """Signing in provisions starter content."""
        supabase.auth.register("ada@example.com", "secret123")

        session = await auth.sign_in("ada@example.com", "secret123")

        assert session.user.email == "ada@example.com"
        assert db.rows("profiles")[0]["starter_content_provisioned"] is True

    async def test_bootstrap_failure_does_not_block(self, auth, supabase, db):
        """A failing bootstrap still yields a session."""
        supabase.auth.register("ada@example.com", "secret123")
        db.fail("profiles", "select")

        session = await auth.sign_in("ada@example.com", "secret123")

        assert session.access_token
        assert db.rows("profiles") == []

    async def test_restore_session(self, auth, supabase, db):
        """A persisted session counts as an authentication event."""
        supabase.auth.login("ada@example.com")

        session = await auth.restore_session()

        assert session is not None
        assert len(db.rows("profiles")) == 1

    async def test_signed_out(self, auth):
        """No session means no token."""
        assert await auth.get_session() is None
        with pytest.raises(UnauthenticatedError):
            await auth.require_access_token()

    async def test_sign_out(self, auth, supabase):
        """Signing out drops the provider session."""
        supabase.auth.login("ada@example.com")

        await auth.sign_out()

        assert supabase.auth.session is None

    async def test_resend_confirmation(self, auth, supabase):
        """Resend goes to the normalized address."""
        await auth.resend_confirmation(" Ada@Example.com")

        assert supabase.auth.resent == ["ada@example.com"]
