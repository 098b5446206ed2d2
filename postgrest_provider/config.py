# postgrest_provider/config.py
from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from postgrest_provider.http.auth import (
    JsonFileTokenProvider,
    NullTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)

# --- Load .env from the project root even when cwd varies ---
# Existing env wins so container/CI secrets are not overridden.
load_dotenv(find_dotenv(usecwd=True), override=False)


# ---------------------------
# Settings (env-driven config)
# ---------------------------
class Settings(BaseSettings):
    API_URL: str = "http://localhost:3000"

    # Token sources, checked in order: TOKEN_FILE, then TOKEN
    TOKEN: str = ""
    TOKEN_FILE: str = ""
    TOKEN_KEY: str = "token"

    # Default transport
    TIMEOUT: float = 15.0
    USER_AGENT: str = "postgrest-provider/0.1"

    LOG_JSON: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PGREST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache
def get_settings() -> Settings:
    return Settings()


def token_provider_from_settings(settings: Settings | None = None) -> TokenProvider:
    settings = settings or get_settings()
    if settings.TOKEN_FILE:
        return JsonFileTokenProvider(settings.TOKEN_FILE, key=settings.TOKEN_KEY)
    if settings.TOKEN:
        return StaticTokenProvider(settings.TOKEN)
    return NullTokenProvider()
