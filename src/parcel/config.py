"""Configuration settings for Parcel."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PARCEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Folder that receives one <input stem>/ directory per conversion
    output_dir: Path = Field(default=Path("."))

    verbose: bool = False

    # Max entries kept in the in-memory log buffer (0 = unbounded)
    log_buffer_size: int = Field(default=1000, ge=0)

    @property
    def buffer_limit(self) -> int | None:
        return self.log_buffer_size or None


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings cache (useful for testing)."""
    global _settings
    _settings = None
