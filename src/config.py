"""Configuration settings for the broadcast notification service."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ------------------------ CONSTANTS ------------------------
ADMIN_ROLE = "admin"
CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"
NOTIFICATION_TITLE_STRIP = 50


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Firebase
    firebase_project_id: str | None = None
    users_collection: str = Field(default="users", min_length=1)

    # Notifications
    default_topic: str = Field(default="all", pattern=r"^[a-zA-Z0-9\-_.~%]+$")
    android_channel_id: str = Field(default="games_channel", min_length=1)
    notification_dry_run: bool = False

    @field_validator("firebase_project_id")
    @classmethod
    def blank_project_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


settings = Settings()
