from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Storage mode: "remote" talks to Supabase, "local" keeps everything in the cache file
    mode: Literal["remote", "local"] = "remote"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # Local cache
    cache_dir: Path = Path.home() / ".notesync"
    cache_key: str = "note-app-data"

    # Autosave quiet periods (seconds)
    autosave_title_delay: float = 1.0
    autosave_content_delay: float = 2.0

    # Account deletion function endpoint
    account_deletion_url: str = "http://localhost:8000/api/v1/account/delete"
    account_deletion_timeout: float = 30.0

    # API (account deletion service)
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""


settings = Settings()
