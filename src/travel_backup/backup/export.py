"""Export one user's data graph as a ``BackupDocument``.

Export is read-only: every row owned by the user, directly or through a
trip, is read and nested into the document.  Row ids are written as the
backup-local ids that ``restore_from_backup`` remaps.

Usage:
    from travel_backup.backup.export import create_backup, write_backup

    document = await create_backup(adapter, user_id=1)
    path = write_backup(document)          # ./backups/travel-life-backup-2026-01-15.json
    path = write_backup(document, "out.json", secret="s3cret")
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from travel_backup.adapters.base import DatabaseClient
from travel_backup.backup.errors import UserNotFoundError
from travel_backup.backup.integrity import sign_backup
from travel_backup.backup.models import BackupDocument, Trip, UserProfile
from travel_backup.backup.versions import CURRENT_VERSION

BACKUP_FILENAME_PREFIX = "travel-life-backup"


def _plain(row: dict) -> dict:
    """Convert ``Decimal`` values (money, coordinates) to floats."""
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in row.items()}


async def _select_all(
    adapter: DatabaseClient,
    table: str,
    filters: dict[str, Any],
    order_by: str = "id",
) -> list[dict]:
    rows = await adapter.select(table, "*", filters=filters, order_by=order_by)
    return [_plain(row) for row in rows]


def mask_document_number(number: str | None) -> str | None:
    """Keep only the last four characters of a travel document number.

    Example:
        >>> mask_document_number("X1234567")
        '****4567'
    """
    if not number:
        return None
    return "****" + number[-4:]


async def _load_checklists(adapter: DatabaseClient, filters: dict[str, Any]) -> list[dict]:
    checklists = []
    for row in await _select_all(adapter, "checklists", filters):
        items = await _select_all(
            adapter, "checklist_items", {"checklist_id": row["id"]}, order_by="sort_order"
        )
        checklists.append({**row, "items": items})
    return checklists


async def create_backup(adapter: DatabaseClient, user_id: int) -> BackupDocument:
    """Read everything owned by ``user_id`` into a new backup document.

    Args:
        adapter: Database adapter implementing ``DatabaseClient``.
        user_id: User whose data is exported.

    Returns:
        ``BackupDocument`` at the current format version.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    users = await adapter.select("users", "*", filters={"id": user_id})
    if not users:
        raise UserNotFoundError("User not found")
    user = users[0]

    by_user = {"user_id": user_id}

    tags = await _select_all(adapter, "trip_tags", by_user)
    companions = await _select_all(adapter, "travel_companions", by_user)
    location_categories = await _select_all(adapter, "location_categories", by_user)
    checklists = await _load_checklists(adapter, {"user_id": user_id, "trip_id": None})

    travel_documents = [
        {**row, "document_number": mask_document_number(row.get("document_number"))}
        for row in await _select_all(adapter, "travel_documents", by_user)
    ]
    trip_series = await _select_all(adapter, "trip_series", by_user)

    # Shared default categories are snapshotted on locations but not exported
    categories_by_id = {
        row["id"]: row
        for row in location_categories
        + await _select_all(adapter, "location_categories", {"user_id": None})
    }
    tag_names = {row["id"]: row["name"] for row in tags}
    companion_names = {row["id"]: row["name"] for row in companions}

    trips = [
        await _export_trip(adapter, row, categories_by_id, tag_names, companion_names)
        for row in await _select_all(adapter, "trips", by_user)
    ]

    profile = UserProfile.model_validate(
        {
            **user,
            "activity_categories": user.get("activity_categories") or [],
        }
    )

    return BackupDocument(
        version=CURRENT_VERSION,
        export_date=datetime.now(timezone.utc),
        user=profile,
        tags=tags,
        companions=companions,
        location_categories=location_categories,
        checklists=checklists,
        travel_documents=travel_documents,
        trip_series=trip_series,
        trips=trips,
    )


async def _export_trip(
    adapter: DatabaseClient,
    trip: dict,
    categories_by_id: dict[int, dict],
    tag_names: dict[int, str],
    companion_names: dict[int, str],
) -> Trip:
    by_trip = {"trip_id": trip["id"]}

    locations = [
        {**row, "category": categories_by_id.get(row.get("category_id"))}
        for row in await _select_all(adapter, "locations", by_trip)
    ]

    transportation = []
    for row in await _select_all(adapter, "transportation", by_trip):
        tracking = await _select_all(
            adapter, "flight_tracking", {"transportation_id": row["id"]}
        )
        transportation.append({**row, "flight_tracking": tracking[0] if tracking else None})

    photo_albums = []
    for row in await _select_all(adapter, "photo_albums", by_trip):
        assignments = await _select_all(
            adapter, "photo_album_assignments", {"album_id": row["id"]}, order_by="sort_order"
        )
        photo_albums.append(
            {
                **row,
                "photos": [
                    {"photo_id": a["photo_id"], "sort_order": a["sort_order"]}
                    for a in assignments
                ],
            }
        )

    tags = [
        tag_names[a["tag_id"]]
        for a in await _select_all(adapter, "trip_tag_assignments", by_trip)
        if a["tag_id"] in tag_names
    ]
    companions = [
        companion_names[a["companion_id"]]
        for a in await _select_all(adapter, "trip_companions", by_trip)
        if a["companion_id"] in companion_names
    ]

    return Trip.model_validate(
        {
            **trip,
            "locations": locations,
            "photos": await _select_all(adapter, "photos", by_trip),
            "activities": await _select_all(adapter, "activities", by_trip),
            "transportation": transportation,
            "lodging": await _select_all(adapter, "lodging", by_trip),
            "journal_entries": await _select_all(adapter, "journal_entries", by_trip),
            "photo_albums": photo_albums,
            "weather_data": await _select_all(adapter, "weather_data", by_trip),
            "tags": tags,
            "companions": companions,
            "checklists": await _load_checklists(adapter, by_trip),
            "entity_links": await _select_all(adapter, "entity_links", by_trip),
            "trip_languages": await _select_all(adapter, "trip_languages", by_trip),
        }
    )


# ============================================================================
# Files
# ============================================================================


def backup_to_dict(document: BackupDocument) -> dict:
    """Return the JSON-ready, camelCase form of ``document``."""
    return document.model_dump(mode="json", by_alias=True)


def backup_filename(day: date | None = None) -> str:
    """Download filename for a backup taken on ``day`` (default today)."""
    day = day or date.today()
    return f"{BACKUP_FILENAME_PREFIX}-{day.isoformat()}.json"


def write_backup(
    document: BackupDocument | dict,
    output_path: str | None = None,
    secret: str | None = None,
) -> str:
    """Write a backup document to a JSON file.

    Args:
        document: Document from ``create_backup`` or its dict form.
        output_path: Path to save the file.  When ``None``, writes
            ``./backups/<backup_filename()>``.
        secret: When given, the file is signed with ``sign_backup``.

    Returns:
        Path of the written file.
    """
    if output_path is None:
        backups_dir = Path.cwd() / "backups"
        backups_dir.mkdir(exist_ok=True)
        output_path = str(backups_dir / backup_filename())

    data = backup_to_dict(document) if isinstance(document, BackupDocument) else document
    if secret:
        data = sign_backup(data, secret)

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    return output_path


def get_backup_info() -> dict:
    """Static description of the backup feature."""
    return {"version": "1.0.0", "supportedFormats": ["json"]}
