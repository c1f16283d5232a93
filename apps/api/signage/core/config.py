"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["store", "mock"] = "store"
    session_cookie_name: str = "session_token"
    token_header: str = "Auth-Token"
    session_ttl_seconds: int = Field(default=600, ge=1)

    rate_limit: str = "60/minute"
    rate_limit_storage_uri: str = "memory://"
    rate_limit_timeout_seconds: float = Field(default=0.5, gt=0)
    # Fail-closed unless explicitly opened.
    rate_limit_fail_open: bool = False

    login_landing: str = "/control"
    login_page: str = "/login/"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SIGNAGE_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
