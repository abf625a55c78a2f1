"""Errors raised by backup export, validation and restore."""


class BackupError(Exception):
    """Base class for backup and restore failures."""

    pass


class IncompatibleBackupVersionError(BackupError):
    """Raised before any database work when the document version is unknown."""

    def __init__(self, version: object, supported: tuple[str, ...]) -> None:
        self.version = version
        self.supported = supported
        super().__init__(
            f"Incompatible backup version. Supported versions: "
            f"{', '.join(supported)}, got {version}"
        )


class RestoreError(BackupError):
    """Raised when the restore transaction fails and was rolled back."""

    pass


class UserNotFoundError(BackupError):
    """Raised when exporting for a user that does not exist."""

    pass


class BackupIntegrityError(BackupError):
    """Raised when a signed backup fails HMAC verification."""

    pass
