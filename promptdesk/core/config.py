"""
Application configuration using Pydantic Settings.
All configuration values can be overridden via environment variables or .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PromptDesk API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_console: bool = True

    # Server (desktop app talks to a loopback-only API)
    host: str = "127.0.0.1"
    port: int = 3456
    cors_origins: List[str] = [
        "tauri://localhost",
        "http://localhost:1420",
        "http://localhost:5173",
    ]

    # Database
    database_url: str = "sqlite+aiosqlite:///./promptdesk.db"
    database_echo: bool = False
    auto_create_schema: bool = True

    # Uploads
    uploads_dir: Path = Path("uploads")
    max_upload_bytes: int = 5 * 1024 * 1024

    # Listing
    default_page_limit: int = 50
    max_page_limit: int = 1000

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is a SQLite file or memory database."""
        return self.database_url.startswith("sqlite")


# Global settings instance (lazily initialized)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
