"""
Configuration settings for the Listings Service.
Loads environment variables using Pydantic Settings.
"""

from enum import Enum
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # General App settings
    ENVIRONMENT: Environment = Field(
        Environment.DEVELOPMENT, alias="LISTINGS_SERVICE_ENVIRONMENT"
    )
    LOGGING_LEVEL: str = Field("INFO", alias="LISTINGS_SERVICE_LOGGING_LEVEL")
    ROOT_PATH: str = Field("/api", alias="LISTINGS_SERVICE_ROOT_PATH")
    DEBUG: bool = Field(False, alias="LISTINGS_SERVICE_DEBUG")

    # Database Configuration
    DATABASE_URL: str = Field(..., alias="LISTINGS_SERVICE_DATABASE_URL")
    DB_POOL_SIZE: int = Field(10, alias="LISTINGS_SERVICE_DB_POOL_SIZE")
    DB_MAX_OVERFLOW: int = Field(20, alias="LISTINGS_SERVICE_DB_MAX_OVERFLOW")
    DB_POOL_TIMEOUT: int = Field(15, alias="LISTINGS_SERVICE_DB_POOL_TIMEOUT")
    DB_POOL_RECYCLE: int = Field(1800, alias="LISTINGS_SERVICE_DB_POOL_RECYCLE")

    # JWT Configuration
    JWT_SECRET_KEY: str = Field(..., alias="LISTINGS_SERVICE_JWT_SECRET_KEY")
    JWT_ALGORITHM: str = Field("HS256", alias="LISTINGS_SERVICE_JWT_ALGORITHM")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        60 * 24, alias="LISTINGS_SERVICE_JWT_ACCESS_TOKEN_EXPIRE_MINUTES"
    )  # 24 hours

    # Bootstrap admin
    INITIAL_ADMIN_EMAIL: str = Field(
        "admin@example.com", alias="LISTINGS_SERVICE_INITIAL_ADMIN_EMAIL"
    )
    INITIAL_ADMIN_PASSWORD: str = Field(
        "admin", alias="LISTINGS_SERVICE_INITIAL_ADMIN_PASSWORD"
    )
    INITIAL_ADMIN_NAME: str = Field(
        "Administrator", alias="LISTINGS_SERVICE_INITIAL_ADMIN_NAME"
    )

    # File storage
    UPLOADS_FS_BASE: str = Field("uploads", alias="LISTINGS_SERVICE_UPLOADS_FS_BASE")
    UPLOADS_PUBLIC_BASE: str = Field(
        "/uploads", alias="LISTINGS_SERVICE_UPLOADS_PUBLIC_BASE"
    )
    PUBLIC_BASE_URL: str = Field(
        "http://localhost:8000", alias="LISTINGS_SERVICE_PUBLIC_BASE_URL"
    )
    PLACEHOLDER_IMAGE_URL: str = Field(
        "/images/placeholder.jpg", alias="LISTINGS_SERVICE_PLACEHOLDER_IMAGE_URL"
    )

    # Upload limits and image processing
    MAX_IMAGE_SIZE: int = Field(10 * 1024 * 1024, alias="LISTINGS_SERVICE_MAX_IMAGE_SIZE")
    MAX_DOCUMENT_SIZE: int = Field(
        10 * 1024 * 1024, alias="LISTINGS_SERVICE_MAX_DOCUMENT_SIZE"
    )
    MAX_IMAGES_PER_PROPERTY: int = Field(
        50, alias="LISTINGS_SERVICE_MAX_IMAGES_PER_PROPERTY"
    )
    ALLOWED_IMAGE_TYPES: List[str] = Field(
        ["image/jpeg", "image/png", "image/webp"],
        alias="LISTINGS_SERVICE_ALLOWED_IMAGE_TYPES",
    )
    IMAGE_QUALITY: int = Field(90, alias="LISTINGS_SERVICE_IMAGE_QUALITY")
    THUMBNAIL_SIZE: int = Field(300, alias="LISTINGS_SERVICE_THUMBNAIL_SIZE")
    THUMBNAIL_QUALITY: int = Field(85, alias="LISTINGS_SERVICE_THUMBNAIL_QUALITY")

    # Listing pagination
    DEFAULT_PAGE_LIMIT: int = Field(16, alias="LISTINGS_SERVICE_DEFAULT_PAGE_LIMIT")
    MAX_PAGE_LIMIT: int = Field(100, alias="LISTINGS_SERVICE_MAX_PAGE_LIMIT")

    # Optimistic locking on property updates
    OPTIMISTIC_LOCK_TOLERANCE_SECONDS: float = Field(
        1.0, alias="LISTINGS_SERVICE_OPTIMISTIC_LOCK_TOLERANCE_SECONDS"
    )

    # Integrity repair: what to do with properties that have images but no main
    MISSING_MAIN_POLICY: Literal["leave", "promote_oldest"] = Field(
        "leave", alias="LISTINGS_SERVICE_MISSING_MAIN_POLICY"
    )

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = Field(
        ["*"], alias="LISTINGS_SERVICE_CORS_ALLOW_ORIGINS"
    )

    # Rate Limiting
    RATE_LIMIT_LOGIN: str = Field("5/minute", alias="LISTINGS_SERVICE_RATE_LIMIT_LOGIN")
    RATE_LIMIT_DEFAULT: str = Field(
        "100/minute", alias="LISTINGS_SERVICE_RATE_LIMIT_DEFAULT"
    )

    @field_validator("DATABASE_URL")
    def validate_database_url(cls, v: str) -> str:
        # Plain postgres URLs are rewritten to the async psycopg driver
        if v.startswith("postgres://"):
            v = "postgresql://" + v[len("postgres://") :]
        if v.startswith("postgresql://"):
            return "postgresql+psycopg://" + v[len("postgresql://") :]
        return v

    @field_validator("PUBLIC_BASE_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Instantiate the settings
settings = Settings()
