from __future__ import annotations

from fastapi import APIRouter

from .endpoints import account, health

api_router = APIRouter()

api_router.include_router(account.router, prefix="/account", tags=["account"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
