"""Application settings and configuration.

This module defines all configuration options for the Chatline application.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The signing secret and the database URL have no defaults: a process
    without them fails while loading settings instead of serving traffic.
    """

    # Application metadata
    app_name: str = Field(default="Chatline", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: Literal["development", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # JWT session settings
    jwt_secret: str = Field(alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expire_days: int = Field(default=7, alias="JWT_EXPIRE_DAYS")

    # Database configuration
    database_url: str = Field(alias="DATABASE_URL")
    db_pool_timeout: float = Field(default=30.0, alias="DB_POOL_TIMEOUT")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # HTTP surface
    client_url: str = Field(default="http://localhost:5173", alias="CLIENT_URL")
    max_body_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_BODY_BYTES")
    frontend_dist: str = Field(default="frontend/dist", alias="FRONTEND_DIST")

    # Outbound calls to the asset host and the email provider
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    cloudinary_cloud_name: str | None = Field(default=None, alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = Field(default=None, alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(default=None, alias="CLOUDINARY_API_SECRET")
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    email_from: str = Field(default="onboarding@resend.dev", alias="EMAIL_FROM")
    email_from_name: str = Field(default="Chatline", alias="EMAIL_FROM_NAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("jwt_secret", "database_url")
    @classmethod
    def require_non_empty(cls, value: str) -> str:
        """Reject blank values for settings the service cannot run without."""
        if not value or not value.strip():
            raise ValueError("must be set to a non-empty value")
        return value

    @property
    def is_development(self) -> bool:
        """Return True when running with a development configuration."""
        return self.environment == "development"

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are only sent over plain HTTP in development."""
        return not self.is_development

    @property
    def jwt_expire_seconds(self) -> int:
        """Return the session lifetime in seconds."""
        return self.jwt_expire_days * 24 * 60 * 60


settings = Settings()  # type: ignore[call-arg]
