"""
FileChat Configuration Module.

Handles all application settings, feature flags, and environment configuration.
Uses pydantic-settings for validation and type safety.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    """Feature flags for enabling/disabling modules."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    upload: bool = True
    chat: bool = True
    conversations: bool = True
    files: bool = True
    voice: bool = True

    def to_dict(self) -> dict[str, bool]:
        """Return feature flags as dictionary for health endpoint."""
        return {
            "upload": self.upload,
            "chat": self.chat,
            "conversations": self.conversations,
            "files": self.files,
            "voice": self.voice,
        }


class StorageSettings(BaseSettings):
    """Local database and file blob storage."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Field(default=Path("data"), description="Directory holding the SQLite database")
    database_name: str = Field(default="filechat.db", description="SQLite database filename")
    upload_dir: Path = Field(default=Path("user_files"), description="Root directory for uploaded files")
    max_file_size_bytes: int = Field(default=200 * 1024 * 1024, description="Upload size ceiling")
    allowed_extensions: list[str] = Field(
        default_factory=lambda: ["log", "csv", "xlsx", "txt"],
        description="Accepted upload extensions (without the dot)",
    )

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_name

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.database_path}"


class GeminiSettings(BaseSettings):
    """Gemini API configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_")

    api_key: str = Field(default="", description="Gemini API Key")
    model: str = Field(default="gemini-2.5-flash", description="Model used for chat answers")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=2000, ge=1)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Single-user mode until auth lands
    default_user_id: int = Field(default=1, validation_alias="DEFAULT_USER_ID")

    # Nested settings
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
