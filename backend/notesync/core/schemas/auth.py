from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from notesync.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Authenticated user extracted from a Supabase session or JWT."""

    id: UUID
    email: str
    role: str | None = None


class AuthSession(AppBaseModel):
    """Tokens for the signed-in user."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: int | None = None
    user: AuthUser


class SignUpResult(AppBaseModel):
    user: AuthUser | None = None
    session: AuthSession | None = None
    email_confirmation_sent: bool = False
