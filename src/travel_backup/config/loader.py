"""Loading of the ``travel-backup.toml`` profile file."""

import tomllib
from pathlib import Path

from travel_backup.config.models import DatabaseConfig, DatabaseProfile
from travel_backup.config.settings import get_settings

CONFIG_FILENAME = "travel-backup.toml"


def load_db_config(config_path: Path | str | None = None) -> DatabaseConfig:
    """Load database configuration from TOML file.

    Args:
        config_path: Path to the config file (default:
            ``settings.config_path`` or ``./travel-backup.toml``).

    Returns:
        DatabaseConfig with all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = get_settings().config_path or Path.cwd() / CONFIG_FILENAME
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(
            f"Database config not found: {config_path}\n"
            f"Create {CONFIG_FILENAME} with a [profiles.<name>] section."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        if not isinstance(profile_data, dict):
            raise ValueError(f"Profile '{name}' must be a table")
        profiles[name] = DatabaseProfile(**profile_data)

    # Parse backup settings
    backup_settings = data.get("backup", {})

    return DatabaseConfig(
        profiles=profiles,
        backup_dir=backup_settings.get("output_dir", "backups"),
    )
