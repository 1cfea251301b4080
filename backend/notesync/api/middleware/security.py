from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from notesync.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    # The service only serves JSON; nothing is allowed to load from it
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none';",
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


class SecurityMiddleware(BaseHTTPMiddleware):
    """Adds security headers and audits calls to destructive account endpoints."""

    def __init__(self, app: ASGIApp, audit_prefix: str = "/account/"):
        super().__init__(app)
        self.audit_prefix = audit_prefix

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        if self.audit_prefix in request.url.path:
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                "Account endpoint accessed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "ip": client_ip,
                    "user_agent": request.headers.get("user-agent", "unknown")[:100],
                }
            )

        return response
