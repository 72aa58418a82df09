"""Application settings and configuration.

This module defines all configuration options for the Talent Connect service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Talent Connect", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Tokens are issued by the external auth provider; we only verify them.
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str | None = Field(default=None, alias="JWT_AUDIENCE")

    # Database configuration
    database_url: str = Field(default="sqlite:///./talent_connect.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis backs rate-limit counters and cross-process realtime fan-out
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Rate limiting
    rate_limits_enabled: bool = Field(default=True, alias="RATE_LIMITS_ENABLED")
    rate_limit_backend: Literal["sql", "redis"] = Field(default="sql", alias="RATE_LIMIT_BACKEND")

    # Realtime delivery
    realtime_backend: Literal["memory", "redis"] = Field(default="memory", alias="REALTIME_BACKEND")
    realtime_channel: str = Field(default="talent-connect:changes", alias="REALTIME_CHANNEL")
    realtime_reconnect_max_seconds: float = Field(
        default=30.0,
        alias="REALTIME_RECONNECT_MAX_SECONDS",
    )

    # Messaging and feeds
    message_page_size: int = Field(default=50, alias="MESSAGE_PAGE_SIZE")
    message_max_length: int = Field(default=4000, alias="MESSAGE_MAX_LENGTH")
    notification_page_size: int = Field(default=10, alias="NOTIFICATION_PAGE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
