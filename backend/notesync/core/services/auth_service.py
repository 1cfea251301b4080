from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from notesync.core.schemas.auth import AuthSession, AuthUser, SignUpResult
from notesync.errors import AuthenticationError, UnauthenticatedError
from notesync.utils.logging import get_logger
from notesync.utils.validation import normalize_email, validate_password_strength

if TYPE_CHECKING:
    from notesync.core.services.bootstrap_service import ProfileBootstrap


logger = get_logger(__name__)


def _error_summary(err: Exception) -> str:
    error_msg = str(err).lower()
    return error_msg[:100] if error_msg else "Unknown error"


class AuthService:
    """Client-side authentication against the Supabase auth provider.

    Every successful authentication event (sign-up with an immediate session,
    sign-in, session restore) is forwarded to the profile bootstrap, whose
    failures never propagate here.
    """

    def __init__(self, supabase_client: Any, bootstrap: ProfileBootstrap | None = None):
        self.supabase = supabase_client
        self._bootstrap = bootstrap

    async def sign_up(self, email: str, password: str) -> SignUpResult:
        email = self._require_email(email)
        is_valid_password, password_error = validate_password_strength(password)
        if not is_valid_password:
            raise AuthenticationError(password_error or "Password is too weak")

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_up({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign up failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": _error_summary(err),
                }
            )

            if "already registered" in error_msg or "already exists" in error_msg:
                raise AuthenticationError("An account with this email already exists") from err
            elif "invalid email" in error_msg:
                raise AuthenticationError("Invalid email format") from err
            elif "weak password" in error_msg:
                raise AuthenticationError("Password does not meet security requirements") from err
            elif "signup" in error_msg and "disabled" in error_msg:
                raise AuthenticationError("Signups are currently disabled") from err
            else:
                raise AuthenticationError("Failed to create account. Please try again.") from err

        if not resp.user:
            raise AuthenticationError("Failed to create account. Please try again.")

        user = self._to_auth_user(resp.user)
        session = getattr(resp, "session", None)
        if not session:
            # Account created, email confirmation pending
            logger.info("Confirmation email sent", extra={"user_id": str(user.id)})
            return SignUpResult(user=user, email_confirmation_sent=True)

        logger.info("User signed up successfully", extra={"user_id": str(user.id)})
        auth_session = self._to_auth_session(session, user)
        await self._on_authenticated(user)
        return SignUpResult(user=user, session=auth_session, email_confirmation_sent=False)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        email = self._require_email(email)
        if not password:
            raise AuthenticationError("Please enter your password")

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_in_with_password({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            error_msg = str(err).lower()

            logger.warning(
                "Sign in failed",
                extra={
                    "email": email,
                    "error_type": type(err).__name__,
                    "error_summary": _error_summary(err),
                }
            )

            if "invalid login credentials" in error_msg or "invalid email or password" in error_msg:
                raise AuthenticationError("Invalid email or password") from err
            elif "email not confirmed" in error_msg:
                raise AuthenticationError("Please confirm your email address before signing in") from err
            elif "too many requests" in error_msg or "rate limit" in error_msg:
                raise AuthenticationError("Too many signin attempts. Please try again later.") from err
            else:
                raise AuthenticationError("Authentication service error. Please try again.") from err

        if not resp.user or not getattr(resp, "session", None):
            raise AuthenticationError("Invalid email or password")

        user = self._to_auth_user(resp.user)
        logger.info("User signed in successfully", extra={"user_id": str(user.id)})
        session = self._to_auth_session(resp.session, user)
        await self._on_authenticated(user)
        return session

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(lambda: self.supabase.auth.sign_out())
            logger.info("User signed out successfully")
        except Exception as err:
            # The local session is dropped regardless of the provider response
            logger.warning("Sign out failed", extra={"error": _error_summary(err)})

    async def get_session(self) -> AuthSession | None:
        """Return the current session, or None when signed out."""
        try:
            session = await asyncio.to_thread(lambda: self.supabase.auth.get_session())
        except Exception as err:
            logger.warning("Session retrieval failed", extra={"error": _error_summary(err)})
            raise AuthenticationError("Failed to retrieve session") from err

        if not session or not getattr(session, "user", None):
            return None
        return self._to_auth_session(session, self._to_auth_user(session.user))

    async def restore_session(self) -> AuthSession | None:
        """Pick up a persisted session at startup and treat it as an authentication event."""
        session = await self.get_session()
        if session is not None:
            await self._on_authenticated(session.user)
        return session

    async def require_access_token(self) -> str:
        session = await self.get_session()
        if session is None:
            raise UnauthenticatedError()
        return session.access_token

    async def resend_confirmation(self, email: str) -> None:
        email = self._require_email(email)
        try:
            await asyncio.to_thread(
                lambda: self.supabase.auth.resend({"type": "signup", "email": email})
            )
        except Exception as err:
            logger.warning(
                "Confirmation resend failed",
                extra={"email": email, "error_summary": _error_summary(err)},
            )
            raise AuthenticationError("Failed to resend confirmation email") from err
        logger.info("Confirmation email resent", extra={"email": email})

    async def _on_authenticated(self, user: AuthUser) -> None:
        if self._bootstrap is not None:
            await self._bootstrap.handle_auth_event(user)

    @staticmethod
    def _require_email(email: str) -> str:
        normalized, error = normalize_email(email)
        if normalized is None:
            raise AuthenticationError(error or "Invalid email format")
        return normalized

    @staticmethod
    def _to_auth_user(user: Any) -> AuthUser:
        return AuthUser(
            id=getattr(user, "id"),
            email=getattr(user, "email", None) or "",
            role=getattr(user, "role", None),
        )

    @staticmethod
    def _to_auth_session(session: Any, user: AuthUser) -> AuthSession:
        return AuthSession(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_in=getattr(session, "expires_in", None),
            expires_at=getattr(session, "expires_at", None),
            user=user,
        )
