"""Configuration management for household-notify."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./data/household_notify.db", description="SQLite database file path")

    # Firebase Cloud Messaging Configuration
    fcm_project_id: str | None = Field(default=None, description="Firebase project ID used in the FCM v1 send URL")
    fcm_access_token: str | None = Field(
        default=None, description="OAuth2 bearer token with the firebase.messaging scope"
    )
    fcm_base_url: str = Field(default="https://fcm.googleapis.com", description="FCM API base URL")
    multicast_batch_size: int = Field(
        default=500, description="Maximum tokens per multicast call (FCM caps this at 500)"
    )

    # Event Feed Configuration
    event_webhook_secret: str | None = Field(
        default=None, description="Shared secret expected in the X-Event-Secret header (optional)"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # FCM Limits
    FCM_MAX_TOKENS_PER_MULTICAST: int = 500
    FCM_MAX_CONCURRENT_REQUESTS: int = 20

    # Notification Payload
    ANDROID_PRIORITY: str = "high"
    APNS_SOUND: str = "default"

    # Placeholders
    DEFAULT_NEW_TASK_TITLE: str = "New household task"
    DEFAULT_TASK_TITLE: str = "A task"
    DEFAULT_DISPLAY_NAME: str = "Someone"

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 100

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
