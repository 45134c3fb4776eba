"""
Configuration management module for the DUPulse API.

This module provides centralized configuration management using pydantic-settings
for loading and validating environment variables from .env file.
"""

from functools import lru_cache
from typing import Optional, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every parameter has a development default; production deployments
    provide the database, auth provider and SMTP values via environment
    variables or .env file.
    """

    # Application Settings
    APP_NAME: str = "DUPulse API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database - explicit URL wins over the individual POSTGRES_* parts
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "dupulse"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432

    # External auth provider (GoTrue compatible REST API)
    AUTH_PROVIDER_URL: str = "http://localhost:54321"
    AUTH_PROVIDER_ANON_KEY: str = ""
    AUTH_PROVIDER_SERVICE_KEY: str = ""
    AUTH_PROVIDER_TIMEOUT: float = Field(default=10.0, gt=0)

    # Admin allow-list
    ADMIN_EMAILS: str = Field(
        default="",
        description="Comma-separated list of admin email addresses"
    )

    # CORS Configuration
    CORS_ORIGINS: str = Field(
        default=(
            "http://localhost:3000,http://localhost:8080,http://localhost:8081,"
            "https://www.dupulse.co.uk,https://dupulse.co.uk"
        ),
        description="Comma-separated list of allowed CORS origins"
    )

    # SMTP relay
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_FROM_EMAIL: Optional[str] = None
    SMTP_SECURE: bool = False
    SMTP_TIMEOUT: int = 30

    # Rate limiting
    LOGIN_RATE_LIMIT: str = "20/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("SMTP_PORT", "POSTGRES_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port numbers are in the TCP range."""
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def database_url(self) -> str:
        """
        Database URL used by the SQLAlchemy engine.

        Returns:
            str: DATABASE_URL when set, otherwise a PostgreSQL URL built from parts
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def smtp_configured(self) -> bool:
        """Whether every SMTP parameter needed to send mail is present."""
        return all([self.SMTP_HOST, self.SMTP_USER, self.SMTP_PASS, self.SMTP_FROM_EMAIL])

    @property
    def smtp_use_ssl(self) -> bool:
        """Implicit TLS is used when requested or on the SMTPS port."""
        return self.SMTP_SECURE or self.SMTP_PORT == 465

    def get_admin_emails(self) -> List[str]:
        """
        Get list of admin emails from comma-separated string.

        Returns:
            List[str]: Lower-cased admin email addresses
        """
        if not self.ADMIN_EMAILS:
            return []
        return [email.strip().lower() for email in self.ADMIN_EMAILS.split(",") if email.strip()]

    def get_cors_origins(self) -> List[str]:
        """
        Get list of allowed CORS origins from comma-separated string.

        Returns:
            List[str]: List of allowed CORS origins
        """
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    This function uses lru_cache to ensure only one Settings instance is created
    and reused throughout the application lifecycle.

    Returns:
        Settings: Singleton Settings instance
    """
    return Settings()
