"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from taskhub.domain.models.task import (
    ALLOWED_FILE_TYPES,
    MAX_ASSIGNEES,
    MAX_TOTAL_FILE_SIZE,
    TaskLimits,
)

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TASKHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # API Configuration
    api_title: str = Field(default="Task Hub")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # CORS
    cors_origins: str | List[str] = Field(default=",".join(DEFAULT_CORS_ORIGINS))
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Task limits
    max_assignees: int = Field(default=MAX_ASSIGNEES, ge=1)
    max_total_file_size_mb: int = Field(default=MAX_TOTAL_FILE_SIZE // (1024 * 1024), ge=1)
    allowed_file_types: str | List[str] = Field(default=",".join(sorted(ALLOWED_FILE_TYPES)))

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return list(DEFAULT_CORS_ORIGINS)
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("allowed_file_types", mode="before")
    @classmethod
    def parse_allowed_file_types(cls, v):
        """Parse MIME types from comma-separated string or list."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return sorted(ALLOWED_FILE_TYPES)
        if isinstance(v, str):
            return [mime.strip() for mime in v.split(",") if mime.strip()]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    @property
    def max_total_file_size_bytes(self) -> int:
        return self.max_total_file_size_mb * 1024 * 1024

    @property
    def task_limits(self) -> TaskLimits:
        """Limits handed to the Task aggregate."""
        return TaskLimits(
            max_assignees=self.max_assignees,
            max_total_file_size=self.max_total_file_size_bytes,
            allowed_file_types=frozenset(self.allowed_file_types),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    return Settings()


# Create a global settings instance
settings = get_settings()
