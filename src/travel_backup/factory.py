"""Database adapter factory.

Resolves which database to talk to and builds the adapter for it.

Resolution order:
1. Explicit ``database_url`` argument
2. Explicit ``profile_name`` argument (looked up in travel-backup.toml)
3. ``TRAVEL_BACKUP_DB_PROFILE`` setting
4. ``TRAVEL_BACKUP_DATABASE_URL`` setting
5. Raise ``ProfileNotFoundError``

Usage:
    from travel_backup.factory import get_adapter

    adapter = await get_adapter(profile_name="local")
    try:
        document = await create_backup(adapter, user_id=1)
    finally:
        await adapter.close()
"""

from urllib.parse import quote

from travel_backup.adapters import AsyncPostgresAdapter, DatabaseClient, InMemoryAdapter
from travel_backup.config import get_settings, load_db_config
from travel_backup.config.models import DatabaseProfile
from travel_backup.schema import JSONB_COLUMNS


class ProfileNotFoundError(Exception):
    """Raised when no database profile is configured."""

    pass


def get_profile(profile_name: str) -> DatabaseProfile:
    """Return the named profile from travel-backup.toml.

    Raises:
        ProfileNotFoundError: If the profile is not defined.
    """
    config = load_db_config()
    if profile_name not in config.profiles:
        available = ", ".join(config.profiles) or "none"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in config.\n"
            f"Available profiles: {available}"
        )
    return config.profiles[profile_name]


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def _adapter_for_profile(profile: DatabaseProfile) -> DatabaseClient:
    if profile.provider == "memory":
        return InMemoryAdapter()
    return AsyncPostgresAdapter(resolve_url(profile), jsonb_columns=JSONB_COLUMNS)


async def get_adapter(
    profile_name: str | None = None,
    database_url: str | None = None,
) -> DatabaseClient:
    """Create a database adapter.

    Adapters are not cached: every call returns a new instance and the
    caller owns closing it.

    Args:
        profile_name: Profile from travel-backup.toml.
        database_url: Direct connection URL; takes precedence over profiles.

    Returns:
        ``AsyncPostgresAdapter``, or ``InMemoryAdapter`` for a profile with
        ``provider = "memory"``.

    Raises:
        ProfileNotFoundError: If nothing identifies a database.
        FileNotFoundError: If a profile is named but the config file is missing.
    """
    if database_url:
        return AsyncPostgresAdapter(database_url, jsonb_columns=JSONB_COLUMNS)

    if profile_name:
        return _adapter_for_profile(get_profile(profile_name))

    settings = get_settings()
    if settings.db_profile:
        return _adapter_for_profile(get_profile(settings.db_profile))
    if settings.database_url:
        return AsyncPostgresAdapter(settings.database_url, jsonb_columns=JSONB_COLUMNS)

    raise ProfileNotFoundError(
        "No database configuration found.\n"
        "Either:\n"
        "  1. Create travel-backup.toml and set TRAVEL_BACKUP_DB_PROFILE=<name>\n"
        "  2. Set TRAVEL_BACKUP_DATABASE_URL"
    )
