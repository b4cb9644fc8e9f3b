"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/league.db"
    database_echo: bool = False

    # Frontend
    frontend_url: str = "http://localhost:3000"

    # Production disables merge, member deletion and clearing history
    production: bool = False

    # Disable legacy JSON import (it wipes all data first)
    disable_import: bool = False

    # Development mode
    dev_mode: bool = False

    @property
    def destructive_ops_enabled(self) -> bool:
        """Check if merge/delete/clear operations are allowed."""
        return not self.production

    @property
    def import_enabled(self) -> bool:
        """Check if legacy data import is allowed."""
        return not self.disable_import


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
