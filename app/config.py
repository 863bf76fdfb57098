"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./bookexchange.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify the bearer tokens issued by the identity provider",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used when stamping requests and notifications",
    )
    write_timeout_seconds: float = Field(
        default=10.0,
        description="Seconds a remote write may take before it is reported as transient failure",
        gt=0,
    )
    request_message_max_length: int = Field(
        default=500,
        description="Maximum number of characters accepted in a book request message",
        gt=0,
    )
    notification_preview_length: int = Field(
        default=100,
        description="Number of request message characters quoted in owner notifications",
        gt=0,
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Lifetime of access tokens minted by create_access_token",
        gt=0,
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_preview_length(self) -> "Settings":
        if self.notification_preview_length > self.request_message_max_length:
            raise ValueError(
                "NOTIFICATION_PREVIEW_LENGTH cannot exceed REQUEST_MESSAGE_MAX_LENGTH"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
