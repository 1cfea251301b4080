from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import settings
from .utils.logging import setup_logging


def create_app() -> FastAPI:
    """Build the account service that hosts the privileged deletion function."""
    setup_logging()

    app = FastAPI(
        title="Notes Sync Account Service",
        debug=settings.debug,
        version="0.1.0",
        root_path=settings.root_path or "",
    )

    # Preflight-friendly CORS for the browser client that invokes the function
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "apikey", "x-client-info"],
        max_age=600,
    )

    # Proxy headers (X-Forwarded-*) when behind ALB/ingress
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    app.add_middleware(SecurityMiddleware, audit_prefix=f"{settings.api_prefix}/account/")

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
