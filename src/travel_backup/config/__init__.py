"""Configuration management: profiles, TOML loading, and environment settings.

Usage:
    >>> from travel_backup.config import load_db_config, get_settings
"""

from travel_backup.config.loader import load_db_config
from travel_backup.config.models import DatabaseConfig, DatabaseProfile
from travel_backup.config.settings import Settings, get_settings

__all__ = [
    "load_db_config",
    "DatabaseConfig",
    "DatabaseProfile",
    "Settings",
    "get_settings",
]
