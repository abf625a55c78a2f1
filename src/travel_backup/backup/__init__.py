"""Backup export, validation and restore of a user's travel data.

Usage:
    from travel_backup.backup import create_backup, restore_from_backup, write_backup
    from travel_backup.backup import validate_backup, sign_backup, verify_backup
"""

from travel_backup.backup.errors import (
    BackupError,
    BackupIntegrityError,
    IncompatibleBackupVersionError,
    RestoreError,
    UserNotFoundError,
)
from travel_backup.backup.export import (
    backup_filename,
    backup_to_dict,
    create_backup,
    get_backup_info,
    write_backup,
)
from travel_backup.backup.integrity import sign_backup, verify_backup
from travel_backup.backup.models import (
    BackupDocument,
    EntityType,
    RestoreOptions,
    RestoreResult,
    RestoreStats,
)
from travel_backup.backup.restore import restore_from_backup
from travel_backup.backup.validate import validate_backup, validate_backup_data
from travel_backup.backup.versions import CURRENT_VERSION, SUPPORTED_VERSIONS

__all__ = [
    # Errors
    "BackupError",
    "BackupIntegrityError",
    "IncompatibleBackupVersionError",
    "RestoreError",
    "UserNotFoundError",
    # Export
    "create_backup",
    "backup_to_dict",
    "backup_filename",
    "write_backup",
    "get_backup_info",
    # Restore
    "restore_from_backup",
    # Validation and integrity
    "validate_backup",
    "validate_backup_data",
    "sign_backup",
    "verify_backup",
    # Models
    "BackupDocument",
    "EntityType",
    "RestoreOptions",
    "RestoreResult",
    "RestoreStats",
    # Versions
    "CURRENT_VERSION",
    "SUPPORTED_VERSIONS",
]
