from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from notesync.errors import BackendError
from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from notesync.core.services.auth_service import AuthService
    from notesync.core.services.workspace import Workspace
    from notesync.db.cache import LocalCache

logger = get_logger(__name__)


class AccountService:
    """Invokes the privileged account deletion function for the signed-in user.

    The function removes every row and the auth identity server side; on success
    the client signs out and drops all local state.
    """

    def __init__(
        self,
        auth: AuthService,
        workspace: Workspace,
        *,
        deletion_url: str,
        cache: LocalCache | None = None,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._auth = auth
        self._workspace = workspace
        self._deletion_url = deletion_url
        self._cache = cache
        self._timeout = timeout
        self._http_client = http_client

    async def delete_account(self) -> None:
        token = await self._auth.require_access_token()
        headers = {"Authorization": f"Bearer {token}"}

        try:
            if self._http_client is not None:
                resp = await self._http_client.post(self._deletion_url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._deletion_url, headers=headers)
        except httpx.HTTPError as err:
            logger.error("Account deletion request failed: %s", err)
            raise BackendError("Account deletion request failed") from err

        if resp.status_code >= 400:
            detail = self._error_detail(resp)
            logger.error(
                "Account deletion rejected",
                extra={"status_code": resp.status_code, "detail": detail},
            )
            raise BackendError(detail, details={"status_code": resp.status_code})

        logger.info("Account deleted; signing out")
        await self._auth.sign_out()
        self._workspace.reset()
        if self._cache is not None:
            self._cache.clear()

    @staticmethod
    def _error_detail(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or "Failed to delete account"
        if isinstance(body, dict):
            return str(body.get("detail") or body.get("error") or "Failed to delete account")
        return "Failed to delete account"
