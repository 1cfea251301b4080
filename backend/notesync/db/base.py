from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from notesync.config import settings
from notesync.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Return a cached Supabase admin client using the service role key.

    Only the account deletion service uses it: removing the auth identity and
    rows across tables requires elevated privileges.
    """
    logger.debug("Initializing Supabase admin client")
    if not settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for admin client")
    key = settings.supabase_service_role_key
    return create_client(
        settings.supabase_url,
        key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    If a JWT is provided, set it as the PostgREST bearer so that RLS policies
    are enforced for all table/rpc operations in this request.
    """
    logger.debug("Creating request-scoped Supabase client")
    anon_key = settings.supabase_anon_key
    if not anon_key:
        raise RuntimeError("supabase_anon_key is required for request client")

    client = create_client(
        settings.supabase_url,
        anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client


def create_user_supabase_client() -> Client:
    """Create the long-lived client used by the notes application.

    The session obtained at sign-in is kept on the client and refreshed
    automatically, so every gateway call is made as the signed-in user.
    """
    logger.debug("Creating user Supabase client")
    anon_key = settings.supabase_anon_key
    if not settings.supabase_url or not anon_key:
        raise RuntimeError("supabase_url and supabase_anon_key are required for remote mode")
    return create_client(
        settings.supabase_url,
        anon_key,
        options=ClientOptions(auto_refresh_token=True, persist_session=True),
    )
