"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Asia/Almaty",
        description="IANA timezone used to compute calendar days and timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level for scripts")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the HTTP API from a browser",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    telegram_bot_token: str | None = Field(
        default=None, description="Bot token used to call the Telegram Bot API"
    )
    telegram_api_url: str = Field(
        default="https://api.telegram.org",
        description="Base URL of the Telegram Bot API",
    )
    telegram_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Network timeout for Telegram API calls"
    )
    notification_max_retries: int = Field(
        default=3, gt=0, description="Failed dispatches tolerated before a notification fails"
    )
    notification_retry_hours: list[int] = Field(
        default_factory=lambda: [2, 4, 8],
        min_length=1,
        description="Backoff schedule, in hours, applied after each failed dispatch",
    )
    notification_queue_batch_size: int = Field(
        default=100, gt=0, description="Maximum notifications processed per queue pass"
    )
    notification_dedup_window_hours: int = Field(
        default=24, gt=0, description="Window in which an identical notification is skipped"
    )
    notification_sending_lease_minutes: int = Field(
        default=30,
        gt=0,
        description="Minutes after which a notification stuck in sending is claimed again",
    )

    @field_validator("app_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
