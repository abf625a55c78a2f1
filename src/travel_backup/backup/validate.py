"""Offline validation of backup documents.

No database I/O: a document is checked for a supported version and the
shape ``BackupDocument`` expects, then scanned for references that a
restore would silently drop.

Usage:
    from travel_backup.backup.validate import validate_backup

    report = validate_backup("backups/travel-life-backup-2026-01-15.json")
    if not report["valid"]:
        print(report["errors"])
"""

import json
from collections import Counter
from typing import Any

from pydantic import ValidationError

from travel_backup.backup.errors import IncompatibleBackupVersionError
from travel_backup.backup.models import BackupDocument, EntityType, Trip
from travel_backup.backup.versions import get_capabilities


def validate_backup_data(data: Any) -> dict:
    """Validate a parsed backup document.

    Returns:
        Dict with ``valid`` (bool), ``errors`` (list[str]),
        and ``warnings`` (list[str]).
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(data, dict):
        errors.append("Backup must be a JSON object")
        return {"valid": False, "errors": errors, "warnings": warnings}

    try:
        get_capabilities(data.get("version"))
    except IncompatibleBackupVersionError as e:
        errors.append(str(e))
        return {"valid": False, "errors": errors, "warnings": warnings}

    try:
        document = BackupDocument.model_validate(data)
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"])
            errors.append(f"{loc}: {err['msg']}")
        return {"valid": False, "errors": errors, "warnings": warnings}

    if document.export_date is None:
        warnings.append("Missing exportDate")

    for label, names in (
        ("tag", [t.name for t in document.tags]),
        ("companion", [c.name for c in document.companions]),
    ):
        for name, count in Counter(names).items():
            if count > 1:
                warnings.append(f"Duplicate {label} name '{name}' ({count} entries)")

    tag_names = {t.name for t in document.tags}
    companion_names = {c.name for c in document.companions}
    series_ids = {s.id for s in document.trip_series or []}

    for trip in document.trips:
        warnings.extend(_trip_warnings(trip, tag_names, companion_names, series_ids))

    return {"valid": not errors, "errors": errors, "warnings": warnings}


def _trip_warnings(
    trip: Trip,
    tag_names: set[str],
    companion_names: set[str],
    series_ids: set[int],
) -> list[str]:
    warnings: list[str] = []
    label = f"Trip '{trip.title}'"

    for name in trip.tags:
        if name not in tag_names:
            warnings.append(f"{label}: tag '{name}' has no top-level entry")
    for name in trip.companions:
        if name not in companion_names:
            warnings.append(f"{label}: companion '{name}' has no top-level entry")

    if trip.series_id is not None and trip.series_id not in series_ids:
        warnings.append(f"{label}: seriesId {trip.series_id} not in tripSeries")

    location_ids = {loc.id for loc in trip.locations if loc.id is not None}
    for loc in trip.locations:
        if loc.parent_id is not None and loc.parent_id not in location_ids:
            warnings.append(
                f"{label}: location '{loc.name}' parentId {loc.parent_id} not in trip"
            )

    photo_ids = {p.id for p in trip.photos if p.id is not None}
    for album in trip.photo_albums:
        for ref in album.photos:
            if ref.photo_id not in photo_ids:
                warnings.append(
                    f"{label}: album '{album.name}' references missing photo {ref.photo_id}"
                )

    known: dict[str, set] = {
        EntityType.LOCATION.value: location_ids,
        EntityType.PHOTO.value: photo_ids,
        EntityType.ACTIVITY.value: {a.id for a in trip.activities},
        EntityType.TRANSPORTATION.value: {t.id for t in trip.transportation},
        EntityType.LODGING.value: {item.id for item in trip.lodging},
        EntityType.JOURNAL_ENTRY.value: {j.id for j in trip.journal_entries},
        EntityType.PHOTO_ALBUM.value: {a.id for a in trip.photo_albums},
    }
    for link in trip.entity_links:
        for side, kind, ref_id in (
            ("source", link.source_type, link.source_id),
            ("target", link.target_type, link.target_id),
        ):
            if ref_id not in known[kind]:
                warnings.append(
                    f"{label}: entity link {side} {kind}:{ref_id} not in trip"
                )

    return warnings


def validate_backup(backup_path: str) -> dict:
    """Validate a backup file.

    This function is **sync** -- it only reads a local JSON file with
    no database I/O.  A signed file is validated without its
    ``integrity`` key.

    Returns:
        Dict with ``valid`` (bool), ``errors`` (list[str]),
        and ``warnings`` (list[str]).
    """
    try:
        with open(backup_path, "r", encoding="utf-8") as f:
            backup_data = json.load(f)
    except FileNotFoundError:
        return {
            "valid": False,
            "errors": [f"Backup file not found: {backup_path}"],
            "warnings": [],
        }
    except json.JSONDecodeError as e:
        return {"valid": False, "errors": [f"Invalid JSON: {e}"], "warnings": []}

    if isinstance(backup_data, dict):
        backup_data.pop("integrity", None)
    return validate_backup_data(backup_data)
