# meeting_days/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime and cover:
    - Logging setup
    - Month-name locale used in reports
    - Graph API client credentials and the calendar owner to query
    - API key protecting Graph-backed endpoints
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Meeting Days Monitor"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, ...).")
    LOG_FORMAT: str = Field(
        "text",
        description="Log output format: 'text' for humans, 'json' for log shippers.",
    )

    DEFAULT_LOCALE: str = Field(
        "nl",
        description="Locale used for month names when a request does not specify one.",
    )

    GRAPH_TENANT_ID: str | None = None
    GRAPH_CLIENT_ID: str | None = None
    GRAPH_CLIENT_SECRET: str | None = None
    GRAPH_BASE_URL: AnyHttpUrl | None = None
    GRAPH_USER_ID: str | None = Field(
        default=None,
        description=(
            "User ID/email whose calendar is queried by the Graph-backed "
            "calendar source."
        ),
    )
    GRAPH_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout applied to every Graph HTTP request.",
    )

    API_KEY: str | None = Field(
        default=None,
        description="API key required for the Graph-backed /calendar endpoints.",
    )

    MAX_IMPORT_SIZE_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Largest calendar export accepted by the import endpoints.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
