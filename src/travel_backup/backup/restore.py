"""Restore a backup document into a user's account.

The whole import runs inside one ``adapter.transaction()``: either every row
of the document is created or none is.  Entities are created parents before
children while an ``IdRemapper`` records the id each backup-local id
received, so later rows (entity links, album photos, trip tags) point at the
new rows.

Usage:
    from travel_backup.backup.restore import restore_from_backup

    result = await restore_from_backup(
        adapter,
        user_id=2,
        backup=json.loads(Path("travel-life-backup-2026-01-15.json").read_text()),
        options={"clearExistingData": True},
    )
    print(result.stats.trips_imported)
"""

import ipaddress
import logging
from typing import Any, TypeVar
from urllib.parse import urlparse

from travel_backup.adapters.base import DatabaseClient
from travel_backup.backup.errors import RestoreError
from travel_backup.backup.models import (
    BackupDocument,
    Checklist,
    Companion,
    EntityType,
    LocationCategory,
    RestoreOptions,
    RestoreResult,
    RestoreStats,
    Tag,
    TravelDocument,
    Trip,
    TripSeries,
    UserProfile,
)
from travel_backup.backup.remap import (
    COMPANION,
    LOCATION_CATEGORY,
    TAG,
    TRIP_SERIES,
    IdRemapper,
)
from travel_backup.backup.versions import Capabilities, get_capabilities

logger = logging.getLogger(__name__)

RESTORE_SUCCESS_MESSAGE = "Data restored successfully"

TreeRecord = TypeVar("TreeRecord")


async def restore_from_backup(
    adapter: DatabaseClient,
    user_id: int,
    backup: BackupDocument | dict,
    options: RestoreOptions | dict | None = None,
) -> RestoreResult:
    """Recreate a backup document's contents as rows owned by ``user_id``.

    The version is checked on the raw document before it is parsed and
    before any database work.

    Args:
        adapter: Database adapter implementing ``DatabaseClient``.
        user_id: Target user; every created row is owned by this user.
        backup: Parsed ``BackupDocument`` or the raw JSON dict.
        options: ``RestoreOptions`` or a dict using either camelCase or
            snake_case keys.  Defaults to keeping existing data and
            importing photos.

    Returns:
        ``RestoreResult`` with ``success=True``, the success message and
        per-category counts.

    Raises:
        IncompatibleBackupVersionError: If the version is not supported.
        pydantic.ValidationError: If the raw document has the wrong shape.
        RestoreError: If anything fails inside the transaction; nothing
            from this call is left in the database.
    """
    raw_version = backup.get("version") if isinstance(backup, dict) else backup.version
    capabilities = get_capabilities(raw_version)

    document = (
        backup
        if isinstance(backup, BackupDocument)
        else BackupDocument.model_validate(backup)
    )
    if options is None:
        options = RestoreOptions()
    elif not isinstance(options, RestoreOptions):
        options = RestoreOptions.model_validate(options)

    stats = RestoreStats()
    remap = IdRemapper()

    logger.info(
        "Restoring backup version %s for user %s (clear=%s, photos=%s)",
        document.version,
        user_id,
        options.clear_existing_data,
        options.import_photos,
    )

    try:
        async with adapter.transaction() as tx:
            if options.clear_existing_data:
                await clear_user_data(tx, user_id, capabilities)

            await _restore_user_settings(tx, user_id, document.user)

            await _restore_tags(tx, user_id, document.tags, remap, stats)
            await _restore_companions(tx, user_id, document.companions, remap, stats)
            await _restore_location_categories(
                tx, user_id, document.location_categories, remap, stats
            )
            for checklist in document.checklists:
                await _insert_checklist(tx, checklist, user_id=user_id, trip_id=None)
                stats.checklists_imported += 1

            if capabilities.has_travel_documents and document.travel_documents:
                await _restore_travel_documents(
                    tx, user_id, document.travel_documents, stats
                )
            if capabilities.has_trip_series and document.trip_series:
                await _restore_trip_series(
                    tx, user_id, document.trip_series, remap, stats
                )

            for trip in document.trips:
                await _restore_trip(tx, user_id, trip, remap, options, stats)
    except Exception as e:
        logger.exception("Error restoring from backup for user %s", user_id)
        raise RestoreError(f"Failed to restore from backup: {e}") from e

    logger.info("Restore for user %s complete: %s", user_id, stats.model_dump())
    return RestoreResult(success=True, message=RESTORE_SUCCESS_MESSAGE, stats=stats)


# ============================================================================
# Clear existing data
# ============================================================================


async def clear_user_data(
    tx: DatabaseClient, user_id: int, capabilities: Capabilities
) -> None:
    """Delete the user's trips and top-level collections, children first.

    Trip series are only cleared for versions that carry them, and travel
    documents likewise.
    """
    for trip in await tx.select("trips", "id", filters={"user_id": user_id}):
        await _clear_trip(tx, trip["id"])

    if capabilities.has_trip_series:
        await tx.delete("trip_series", {"user_id": user_id})
    await tx.delete("trip_tags", {"user_id": user_id})
    await tx.delete("travel_companions", {"user_id": user_id})
    await tx.delete("location_categories", {"user_id": user_id})
    await _delete_checklists(tx, {"user_id": user_id, "trip_id": None})
    if capabilities.has_travel_documents:
        await tx.delete("travel_documents", {"user_id": user_id})


async def _clear_trip(tx: DatabaseClient, trip_id: int) -> None:
    by_trip = {"trip_id": trip_id}

    for table in ("entity_links", "trip_languages", "trip_tag_assignments", "trip_companions"):
        await tx.delete(table, by_trip)

    await _delete_checklists(tx, by_trip)

    for album in await tx.select("photo_albums", "id", filters=by_trip):
        await tx.delete("photo_album_assignments", {"album_id": album["id"]})
    await tx.delete("photo_albums", by_trip)
    await tx.delete("weather_data", by_trip)

    for transport in await tx.select("transportation", "id", filters=by_trip):
        await tx.delete("flight_tracking", {"transportation_id": transport["id"]})

    for table in ("transportation", "lodging", "journal_entries", "activities", "photos", "locations"):
        await tx.delete(table, by_trip)

    await tx.delete("trips", {"id": trip_id})


async def _delete_checklists(tx: DatabaseClient, filters: dict[str, Any]) -> None:
    for checklist in await tx.select("checklists", "id", filters=filters):
        await tx.delete("checklist_items", {"checklist_id": checklist["id"]})
    await tx.delete("checklists", filters)


# ============================================================================
# User settings and top-level collections
# ============================================================================


def is_internal_url(url: str) -> bool:
    """Return True if ``url`` targets localhost or a non-public literal IP."""
    host = urlparse(url).hostname
    if not host:
        return True
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_unspecified
    )


async def _restore_user_settings(
    tx: DatabaseClient, user_id: int, profile: UserProfile
) -> None:
    current = await tx.select("users", "timezone", filters={"id": user_id})
    current_timezone = current[0]["timezone"] if current else None

    immich_url = profile.immich_api_url
    if immich_url and is_internal_url(immich_url):
        logger.warning("Dropping internal Immich URL from backup for user %s", user_id)
        immich_url = None

    timezone = profile.timezone
    if timezone is None:
        timezone = current_timezone if current_timezone is not None else "UTC"

    settings: dict[str, Any] = {
        "timezone": timezone,
        "activity_categories": [c.model_dump() for c in profile.activity_categories],
        "immich_api_url": immich_url,
        "immich_api_key": profile.immich_api_key if immich_url else None,
        "weather_api_key": profile.weather_api_key,
        "aviationstack_api_key": profile.aviationstack_api_key,
        "openrouteservice_api_key": profile.openrouteservice_api_key,
    }
    if profile.trip_types is not None:
        settings["trip_types"] = [t.model_dump() for t in profile.trip_types]

    await tx.update("users", settings, {"id": user_id})


async def _restore_tags(
    tx: DatabaseClient,
    user_id: int,
    tags: list[Tag],
    remap: IdRemapper,
    stats: RestoreStats,
) -> None:
    for tag in tags:
        created = await tx.insert("trip_tags", tag.to_row(user_id=user_id))
        remap.record(TAG, tag.name, created["id"])
        stats.tags_imported += 1


async def _restore_companions(
    tx: DatabaseClient,
    user_id: int,
    companions: list[Companion],
    remap: IdRemapper,
    stats: RestoreStats,
) -> None:
    for companion in companions:
        created = await tx.insert("travel_companions", companion.to_row(user_id=user_id))
        remap.record(COMPANION, companion.name, created["id"])
        stats.companions_imported += 1


async def _restore_location_categories(
    tx: DatabaseClient,
    user_id: int,
    categories: list[LocationCategory],
    remap: IdRemapper,
    stats: RestoreStats,
) -> None:
    for category in categories:
        created = await tx.insert("location_categories", category.to_row(user_id=user_id))
        remap.record(LOCATION_CATEGORY, category.name, created["id"])
        stats.location_categories_imported += 1


async def _insert_checklist(
    tx: DatabaseClient, checklist: Checklist, user_id: int, trip_id: int | None
) -> None:
    created = await tx.insert(
        "checklists", checklist.to_row(user_id=user_id, trip_id=trip_id)
    )
    for item in checklist.items:
        await tx.insert("checklist_items", item.to_row(checklist_id=created["id"]))


async def _restore_travel_documents(
    tx: DatabaseClient,
    user_id: int,
    documents: list[TravelDocument],
    stats: RestoreStats,
) -> None:
    # Document numbers are masked in backups and never restored
    for document in documents:
        existing = await tx.select(
            "travel_documents",
            "id",
            filters={
                "user_id": user_id,
                "type": document.type,
                "issuing_country": document.issuing_country,
                "name": document.name,
            },
        )
        if existing:
            continue
        await tx.insert(
            "travel_documents", document.to_row(user_id=user_id, document_number=None)
        )
        stats.travel_documents_imported += 1


async def _restore_trip_series(
    tx: DatabaseClient,
    user_id: int,
    series: list[TripSeries],
    remap: IdRemapper,
    stats: RestoreStats,
) -> None:
    for item in series:
        created = await tx.insert("trip_series", item.to_row(user_id=user_id))
        remap.record(TRIP_SERIES, item.id, created["id"])
        stats.trip_series_imported += 1


# ============================================================================
# Trips
# ============================================================================


def parents_first(records: list[TreeRecord]) -> list[TreeRecord]:
    """Order tree records so each parent comes before its children.

    Records are anything with ``id`` and ``parent_id``.  A ``parent_id`` that
    does not name a record in ``records`` makes the record a root.  Records
    that form a parent cycle have ``parent_id`` cleared and become roots;
    their descendants keep their parents.
    """
    known = {r.id for r in records if r.id is not None}
    placed: set[int] = set()
    ordered: list[TreeRecord] = []
    pending = list(records)

    while pending:
        waiting = []
        for record in pending:
            parent = record.parent_id
            if parent is None or parent not in known or parent in placed:
                ordered.append(record)
                if record.id is not None:
                    placed.add(record.id)
            else:
                waiting.append(record)

        if len(waiting) == len(pending):
            waiting = _break_cycles(waiting)
        pending = waiting

    return ordered


def _break_cycles(records: list[TreeRecord]) -> list[TreeRecord]:
    by_id = {r.id: r for r in records}

    def on_cycle(record: TreeRecord) -> bool:
        seen: set[int] = set()
        current = record.parent_id
        while current in by_id and current not in seen:
            if current == record.id:
                return True
            seen.add(current)
            current = by_id[current].parent_id
        return False

    cycle = {r.id for r in records if on_cycle(r)}
    logger.warning("Parent cycle among %d records; restoring them as roots", len(cycle))
    return [
        r.model_copy(update={"parent_id": None}) if r.id in cycle else r
        for r in records
    ]


async def _restore_trip(
    tx: DatabaseClient,
    user_id: int,
    trip: Trip,
    remap: IdRemapper,
    options: RestoreOptions,
    stats: RestoreStats,
) -> None:
    """Create one trip and everything it owns."""
    ids = remap.child()

    series_id = remap.resolve(TRIP_SERIES, trip.series_id)
    created = await tx.insert(
        "trips",
        trip.to_row(
            user_id=user_id,
            cover_photo_id=None,
            banner_photo_id=None,
            series_id=series_id,
            series_order=trip.series_order if series_id is not None else None,
        ),
    )
    trip_id = created["id"]
    stats.trips_imported += 1

    for location in parents_first(trip.locations):
        category_id = (
            remap.resolve(LOCATION_CATEGORY, location.category.name)
            if location.category is not None
            else None
        )
        row = await tx.insert(
            "locations",
            location.to_row(
                trip_id=trip_id,
                parent_id=ids.resolve(EntityType.LOCATION, location.parent_id),
                category_id=category_id,
            ),
        )
        ids.record(EntityType.LOCATION, location.id, row["id"])
        stats.locations_imported += 1

    if options.import_photos:
        for photo in trip.photos:
            row = await tx.insert("photos", photo.to_row(trip_id=trip_id))
            ids.record(EntityType.PHOTO, photo.id, row["id"])
            stats.photos_imported += 1

        cover_id = ids.resolve(EntityType.PHOTO, trip.cover_photo_id)
        banner_id = ids.resolve(EntityType.PHOTO, trip.banner_photo_id)
        if cover_id is not None or banner_id is not None:
            await tx.update(
                "trips",
                {"cover_photo_id": cover_id, "banner_photo_id": banner_id},
                {"id": trip_id},
            )

    for activity in parents_first(trip.activities):
        row = await tx.insert(
            "activities",
            activity.to_row(
                trip_id=trip_id,
                parent_id=ids.resolve(EntityType.ACTIVITY, activity.parent_id),
            ),
        )
        ids.record(EntityType.ACTIVITY, activity.id, row["id"])
        stats.activities_imported += 1

    for transport in trip.transportation:
        row = await tx.insert(
            "transportation",
            transport.to_row(
                trip_id=trip_id,
                start_location_id=ids.resolve(EntityType.LOCATION, transport.start_location_id),
                end_location_id=ids.resolve(EntityType.LOCATION, transport.end_location_id),
            ),
        )
        ids.record(EntityType.TRANSPORTATION, transport.id, row["id"])
        stats.transportation_imported += 1

        if transport.flight_tracking is not None:
            await tx.insert(
                "flight_tracking",
                transport.flight_tracking.to_row(transportation_id=row["id"]),
            )

    for lodging in trip.lodging:
        row = await tx.insert("lodging", lodging.to_row(trip_id=trip_id))
        ids.record(EntityType.LODGING, lodging.id, row["id"])
        stats.lodging_imported += 1

    for entry in trip.journal_entries:
        row = await tx.insert("journal_entries", entry.to_row(trip_id=trip_id))
        ids.record(EntityType.JOURNAL_ENTRY, entry.id, row["id"])
        stats.journal_entries_imported += 1

    for album in trip.photo_albums:
        row = await tx.insert(
            "photo_albums",
            album.to_row(
                trip_id=trip_id,
                cover_photo_id=ids.resolve(EntityType.PHOTO, album.cover_photo_id),
            ),
        )
        album_id = row["id"]
        ids.record(EntityType.PHOTO_ALBUM, album.id, album_id)
        stats.photo_albums_imported += 1

        assigned: set[int] = set()
        for ref in album.photos:
            # Unknown or skipped photos are dropped from the album
            photo_id = ids.resolve(EntityType.PHOTO, ref.photo_id)
            if photo_id is None or photo_id in assigned:
                continue
            await tx.insert(
                "photo_album_assignments",
                {"album_id": album_id, "photo_id": photo_id, "sort_order": ref.sort_order},
            )
            assigned.add(photo_id)

    for weather in trip.weather_data:
        await tx.insert(
            "weather_data",
            weather.to_row(
                trip_id=trip_id,
                location_id=ids.resolve(EntityType.LOCATION, weather.location_id),
            ),
        )
        stats.weather_data_imported += 1

    for name in dict.fromkeys(trip.tags):
        tag_id = remap.resolve(TAG, name)
        if tag_id is None:
            logger.debug("Trip %r references unknown tag %r", trip.title, name)
            continue
        await tx.insert("trip_tag_assignments", {"trip_id": trip_id, "tag_id": tag_id})

    for name in dict.fromkeys(trip.companions):
        companion_id = remap.resolve(COMPANION, name)
        if companion_id is None:
            logger.debug("Trip %r references unknown companion %r", trip.title, name)
            continue
        await tx.insert(
            "trip_companions", {"trip_id": trip_id, "companion_id": companion_id}
        )

    for checklist in trip.checklists:
        await _insert_checklist(tx, checklist, user_id=user_id, trip_id=trip_id)
        stats.checklists_imported += 1

    for link in trip.entity_links:
        source_id = ids.resolve(link.source_type, link.source_id)
        target_id = ids.resolve(link.target_type, link.target_id)
        if source_id is None or target_id is None:
            logger.debug(
                "Skipping entity link %s:%s -> %s:%s (endpoint not restored)",
                link.source_type,
                link.source_id,
                link.target_type,
                link.target_id,
            )
            stats.entity_links_skipped += 1
            continue
        await tx.insert(
            "entity_links",
            link.to_row(trip_id=trip_id, source_id=source_id, target_id=target_id),
        )
        stats.entity_links_imported += 1

    for language in trip.trip_languages:
        await tx.insert("trip_languages", language.to_row(trip_id=trip_id))
        stats.trip_languages_imported += 1
