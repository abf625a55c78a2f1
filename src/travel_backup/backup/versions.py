"""Backup format versions and what each one carries.

Older documents stay restorable: the capability table is consulted once at
the start of a restore instead of comparing version strings along the way.
"""

from typing import NamedTuple

from travel_backup.backup.errors import IncompatibleBackupVersionError


class Capabilities(NamedTuple):
    """Optional top-level collections present in a backup version."""

    has_travel_documents: bool
    has_trip_series: bool


# Ordered oldest to newest
VERSION_CAPABILITIES: dict[str, Capabilities] = {
    "1.0.0": Capabilities(has_travel_documents=False, has_trip_series=False),
    "1.1.0": Capabilities(has_travel_documents=True, has_trip_series=False),
    "1.2.0": Capabilities(has_travel_documents=True, has_trip_series=True),
}

SUPPORTED_VERSIONS: tuple[str, ...] = tuple(VERSION_CAPABILITIES)
CURRENT_VERSION = SUPPORTED_VERSIONS[-1]


def get_capabilities(version: object) -> Capabilities:
    """Return the capabilities of ``version``.

    Raises:
        IncompatibleBackupVersionError: If ``version`` is not a supported
            version string.
    """
    if not isinstance(version, str) or version not in VERSION_CAPABILITIES:
        raise IncompatibleBackupVersionError(version, SUPPORTED_VERSIONS)
    return VERSION_CAPABILITIES[version]
