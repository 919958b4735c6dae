"""Application settings and configuration.

This module defines all configuration options for the Dossier moderation
service. Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Dossier Moderation", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./dossier.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT settings for tokens minted by the identity provider
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Moderation thresholds and field bounds
    auto_hide_threshold: int = Field(default=3, ge=1, alias="AUTO_HIDE_THRESHOLD")
    comment_min_length: int = Field(default=3, alias="COMMENT_MIN_LENGTH")
    comment_max_length: int = Field(default=2000, alias="COMMENT_MAX_LENGTH")
    discussion_title_min_length: int = Field(default=5, alias="DISCUSSION_TITLE_MIN_LENGTH")
    discussion_title_max_length: int = Field(default=200, alias="DISCUSSION_TITLE_MAX_LENGTH")
    discussion_body_min_length: int = Field(default=20, alias="DISCUSSION_BODY_MIN_LENGTH")
    discussion_max_tags: int = Field(default=5, alias="DISCUSSION_MAX_TAGS")
    guest_name_max_length: int = Field(default=80, alias="GUEST_NAME_MAX_LENGTH")
    dispute_reason_min_length: int = Field(default=10, alias="DISPUTE_REASON_MIN_LENGTH")
    audit_preview_length: int = Field(default=100, alias="AUDIT_PREVIEW_LENGTH")

    # External AI content-safety service (guest content only)
    safety_service_url: str | None = Field(default=None, alias="SAFETY_SERVICE_URL")
    safety_service_api_key: str | None = Field(default=None, alias="SAFETY_SERVICE_API_KEY")
    safety_service_timeout_seconds: float = Field(
        default=10.0,
        alias="SAFETY_SERVICE_TIMEOUT_SECONDS",
    )

    # Cache revalidation webhook for the page layer
    revalidate_webhook_url: str | None = Field(default=None, alias="REVALIDATE_WEBHOOK_URL")
    revalidate_timeout_seconds: float = Field(default=2.0, alias="REVALIDATE_TIMEOUT_SECONDS")

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


settings = Settings()  # type: ignore[call-arg]
