"""Pydantic models for database configuration."""

from typing import Literal

from pydantic import BaseModel


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from travel-backup.toml."""

    url: str = ""
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: Literal["postgres", "memory"] = "postgres"


class DatabaseConfig(BaseModel):
    """Complete configuration from travel-backup.toml."""

    profiles: dict[str, DatabaseProfile]
    backup_dir: str = "backups"
