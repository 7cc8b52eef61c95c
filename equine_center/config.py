"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Equine Command Center"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./data/equine.db"
    seed_sample_data: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text | json
    log_dir: Path = Path("logs")
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5

    # Horses
    tracking_id_prefix: str = "DM"
    tracking_id_max_attempts: int = 100

    # Problems view: all_assignments | active_assignments
    capacity_mode: str = "all_assignments"

    # Command center
    command_center_refresh_seconds: float = 30.0
    command_center_monitor_enabled: bool = True

    # Season context
    default_season: str = "2024"
    default_racetrack: str = "Del Mar"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
