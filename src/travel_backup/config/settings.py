"""Environment settings for travel-backup."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``TRAVEL_BACKUP_*`` environment variables or ``.env``.

    Database profiles live in ``travel-backup.toml``; these settings only
    choose between them or bypass them.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAVEL_BACKUP_",
        env_file=".env",
        extra="ignore",
    )

    # Profile name from travel-backup.toml
    db_profile: str | None = None

    # Direct connection URL, used when no profile is selected
    database_url: str | None = None

    # Location of travel-backup.toml
    config_path: str | None = None

    # HMAC key for signing and verifying backup files
    secret: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
