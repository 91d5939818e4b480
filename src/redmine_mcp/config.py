"""Redmine connection configuration loaded from environment variables.

Required:
    REDMINE_URL - base URL of the Redmine instance (e.g. https://redmine.example.com)

Authentication (one of these is required):
    REDMINE_API_KEY - API key authentication
    REDMINE_USERNAME + REDMINE_PASSWORD - basic authentication

Optional:
    REDMINE_TIMEOUT_MS - per-request timeout in milliseconds (default: 30000)
    LOG_LEVEL - logging level for the server (default: INFO)
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_TIMEOUT_MS = 30000


class Settings(BaseSettings):
    """Raw settings read from the environment (or a local .env file)."""

    redmine_url: Optional[str] = None
    redmine_api_key: Optional[str] = None
    redmine_username: Optional[str] = None
    redmine_password: Optional[str] = None
    redmine_timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False
    )

    @field_validator(
        "redmine_url", "redmine_api_key", "redmine_username", "redmine_password",
        mode="before"
    )
    @classmethod
    def blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class RedmineConfig:
    """Validated connection settings for a Redmine instance."""

    url: str
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def auth_method(self) -> str:
        return "API Key" if self.api_key else "Basic Auth"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_config(settings: Optional[Settings] = None) -> RedmineConfig:
    """Validate settings and build the Redmine connection config.

    Args:
        settings: Settings to validate (defaults to the environment)

    Returns:
        RedmineConfig with a normalized URL (no trailing slash)

    Raises:
        ConfigurationError: If the URL or credentials are missing
    """
    settings = settings or get_settings()

    if not settings.redmine_url:
        raise ConfigurationError(
            "REDMINE_URL environment variable is required. "
            "Set it to your Redmine instance URL (e.g. https://redmine.example.com)"
        )

    if not settings.redmine_api_key and not settings.redmine_username:
        raise ConfigurationError(
            "Authentication is required. Set either:\n"
            "  - REDMINE_API_KEY for API key authentication, or\n"
            "  - REDMINE_USERNAME and REDMINE_PASSWORD for basic authentication"
        )

    if settings.redmine_username and not settings.redmine_password:
        raise ConfigurationError(
            "REDMINE_PASSWORD is required when using REDMINE_USERNAME for basic authentication"
        )

    return RedmineConfig(
        url=settings.redmine_url.rstrip("/"),
        api_key=settings.redmine_api_key,
        username=settings.redmine_username,
        password=settings.redmine_password,
    )
