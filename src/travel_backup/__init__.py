"""travel-backup: versioned backup and restore of travel journal data.

Exports one user's trips and collections as a JSON document and restores
such a document into any account, remapping every id, inside a single
transaction.

Usage:
    from travel_backup import get_adapter, create_backup, restore_from_backup
    from travel_backup import RestoreOptions, validate_backup
"""

__version__ = "0.1.0"

# Adapters
from travel_backup.adapters import AsyncPostgresAdapter, DatabaseClient, InMemoryAdapter

# Backup
from travel_backup.backup import (
    BackupDocument,
    BackupError,
    IncompatibleBackupVersionError,
    RestoreError,
    RestoreOptions,
    RestoreResult,
    create_backup,
    restore_from_backup,
    validate_backup,
    write_backup,
)

# Config
from travel_backup.config import DatabaseConfig, DatabaseProfile, load_db_config

# Factory
from travel_backup.factory import ProfileNotFoundError, get_adapter, resolve_url

__all__ = [
    # Adapters
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "InMemoryAdapter",
    # Backup
    "BackupDocument",
    "BackupError",
    "IncompatibleBackupVersionError",
    "RestoreError",
    "RestoreOptions",
    "RestoreResult",
    "create_backup",
    "restore_from_backup",
    "validate_backup",
    "write_backup",
    # Config
    "load_db_config",
    "DatabaseProfile",
    "DatabaseConfig",
    # Factory
    "get_adapter",
    "ProfileNotFoundError",
    "resolve_url",
]
