"""Server settings using Pydantic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Demo server settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="127.0.0.1", alias="KEYAUTH_HOST")
    api_port: int = Field(default=8080, alias="KEYAUTH_PORT")

    # Key Auth
    api_keys: list[str] = Field(
        default_factory=list,
        alias="KEYAUTH_API_KEYS",
        description="Accepted keys as a JSON list; empty accepts any key",
    )
    key_lookup: str = Field(default="header:Authorization", alias="KEYAUTH_KEY_LOOKUP")
    auth_scheme: str = Field(default="Bearer", alias="KEYAUTH_AUTH_SCHEME")
    context_key: str = Field(default="token", alias="KEYAUTH_CONTEXT_KEY")
    exempt_paths: list[str] = Field(
        default_factory=lambda: ["/health", "/docs", "/openapi.json"],
        alias="KEYAUTH_EXEMPT_PATHS",
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()
