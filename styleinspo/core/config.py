"""Configuration management for the StyleInspo application.

This module handles all configuration aspects of the application including:
- Environment variable loading and validation using Pydantic
- Per-integration settings groups (database, storage, vision, email, admin)
- Environment-specific configurations

Every third-party integration is optional. A missing credential switches the
integration off and the rest of the application keeps working.
"""

from functools import lru_cache
from typing import List, Optional
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=True,
    extra="ignore",
)


class EnvironmentType(str, Enum):
    """Environment types for configuration management"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class DatabaseSettings(BaseSettings):
    """Database-specific configurations"""

    DATABASE_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "styleinspo"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    SQL_ECHO: bool = False

    model_config = _ENV

    @property
    def url(self) -> str:
        """Connection URL, an explicit DATABASE_URL wins over the parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class AzureStorageSettings(BaseSettings):
    """Azure Blob Storage settings for hosted images"""

    AZURE_STORAGE_CONNECTION_STRING: Optional[str] = None
    AZURE_STORAGE_CONTAINER: str = "styleinspo"
    AZURE_STORAGE_FOLDER: str = "looks"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    model_config = _ENV

    @property
    def configured(self) -> bool:
        return bool(self.AZURE_STORAGE_CONNECTION_STRING)


class VisionSettings(BaseSettings):
    """Vision provider credentials, tried in order: Replicate then OpenAI"""

    REPLICATE_API_TOKEN: Optional[str] = None
    REPLICATE_MODEL_VERSION: str = (
        "e5caf557dd9e5dcee46442e1315291ef1867f027991ede8ff95e304d4f734200"
    )
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_VISION_MODEL: str = "gpt-4o"
    VISION_TIMEOUT_SECONDS: float = 60.0

    model_config = _ENV


class EmailSettings(BaseSettings):
    """Outbound email for the contact form relay"""

    RESEND_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "StyleInspo Contact Form <onboarding@resend.dev>"
    EMAIL_TIMEOUT_SECONDS: float = 15.0

    model_config = _ENV

    @property
    def configured(self) -> bool:
        return bool(self.RESEND_API_KEY)


class AdminSettings(BaseSettings):
    """The single admin identity allowed to mutate content"""

    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    model_config = _ENV


class Settings(BaseSettings):
    """Main application settings with environment-specific configurations"""

    # Basic application settings
    APP_NAME: str = "StyleInspo"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    SITE_URL: str = "http://localhost:8000"
    BRAND_NAME: str = "Fashion Affiliate"

    # Security settings
    SECRET_KEY: str = "change-me-in-production"
    ALLOWED_ORIGINS: List[str] = ["*"]
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # API settings
    API_V1_PREFIX: str = "/api/v1"

    # Monitoring
    APPLICATIONINSIGHTS_CONNECTION_STRING: Optional[str] = None

    # Integration groups
    DB: DatabaseSettings = Field(default_factory=DatabaseSettings)
    STORAGE: AzureStorageSettings = Field(default_factory=AzureStorageSettings)
    VISION: VisionSettings = Field(default_factory=VisionSettings)
    EMAIL: EmailSettings = Field(default_factory=EmailSettings)
    ADMIN: AdminSettings = Field(default_factory=AdminSettings)

    model_config = _ENV

    @property
    def PROD(self) -> bool:
        """Check if environment is production"""
        return self.ENVIRONMENT == EnvironmentType.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
