"""Configuration management using pydantic-settings."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JIRA_INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Jira Cloud API
    jira_base_url: str = Field(
        default="",
        description="Jira site base URL (e.g., https://example.atlassian.net)",
    )
    jira_email: str = Field(
        default="",
        description="Account email used for HTTP basic auth",
    )
    jira_api_token: str = Field(
        default="",
        description="Jira API token",
    )
    jira_project: str = Field(
        default="",
        description="Default project key to sync",
    )

    # Fetching
    page_size: int = Field(
        default=100,
        description="Issues per page for single-page and fetch-all activities",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Per-request HTTP timeout in seconds",
    )
    max_pages: int = Field(
        default=10000,
        description="Upper bound on pages fetched by one fetch-all run",
    )
    long_running_timeout_minutes: int = Field(
        default=30,
        description="Declared duration of the fetch-all activities",
    )

    # Document storage
    db_path: Path = Field(
        default=Path.home() / ".jira-ingest" / "documents.db",
        description="SQLite database path for stored documents",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level for the command-line host",
    )

    def is_jira_configured(self) -> bool:
        """Check if Jira credentials are configured."""
        return bool(self.jira_base_url and self.jira_email and self.jira_api_token)


# Global settings instance
settings = Settings()
