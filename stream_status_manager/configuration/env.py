"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from stream_status_manager.utils.constants import DEFAULT_DOCUMENT_PATH, DEFAULT_MAX_MESSAGE_AGE


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Status repository settings
    SS_GH_REPO: str | None = None
    SS_INDEX_FILE: str = DEFAULT_DOCUMENT_PATH
    SS_BRANCH: str | None = None
    SS_WORKSPACE: str | None = None
    SS_ABSENT_ENTITY_POLICY: str = "ignore"

    # Git credentials
    SS_USERNAME: str | None = None
    SS_TOKEN: str | None = None

    # Webhook settings
    SS_SECRETKEY: str | None = None
    SS_MAX_MESSAGE_AGE: int = DEFAULT_MAX_MESSAGE_AGE

    # Listener settings. Hosting platforms set PORT, which wins over SS_PORT.
    PORT: int | None = None
    SS_PORT: int | None = None


settings = Settings()
