"""Backup document models.

The JSON document uses camelCase keys; the models use the snake_case
column names of ``travel_backup.schema.tables``.  A model validates from
either form (``populate_by_name``), dumps to rows with ``to_row()`` and to
JSON with ``model_dump(mode="json", by_alias=True)``.

``id``/``parentId``-style fields inside a document are backup-local: they
identify entities within the document and are remapped on restore.

Usage:
    from travel_backup.backup.models import BackupDocument, RestoreOptions

    document = BackupDocument.model_validate(json.loads(raw))
    row = document.tags[0].to_row(user_id=7)
"""

import datetime as dt
from enum import Enum
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class EntityType(str, Enum):
    """Entity kinds that can be joined by an ``EntityLink``."""

    ACTIVITY = "ACTIVITY"
    LOCATION = "LOCATION"
    PHOTO = "PHOTO"
    LODGING = "LODGING"
    TRANSPORTATION = "TRANSPORTATION"
    JOURNAL_ENTRY = "JOURNAL_ENTRY"
    PHOTO_ALBUM = "PHOTO_ALBUM"


class BackupRecord(BaseModel):
    """Base for every document model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    # Fields that are not columns of the target table
    row_exclude: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def null_list_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        # null collections read as empty
        if value is None and get_origin(cls.model_fields[info.field_name].annotation) is list:
            return []
        return value

    def to_row(self, **columns: Any) -> dict:
        """Return the column values of this record merged with ``columns``."""
        row = self.model_dump(exclude=set(self.row_exclude))
        row.update(columns)
        return row


# ============================================================================
# User and top-level collections
# ============================================================================


class ActivityCategory(BackupRecord):
    name: str
    emoji: str | None = None


class UserProfile(BackupRecord):
    """Snapshot of the exporting user's profile and integration settings."""

    username: str | None = None
    email: str | None = None
    timezone: str | None = None
    activity_categories: list[ActivityCategory] = Field(default_factory=list)
    trip_types: list[ActivityCategory] | None = None
    immich_api_url: str | None = None
    immich_api_key: str | None = None
    weather_api_key: str | None = None
    aviationstack_api_key: str | None = None
    openrouteservice_api_key: str | None = None


class Tag(BackupRecord):
    name: str
    color: str | None = None
    text_color: str | None = None


class Companion(BackupRecord):
    name: str
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    relationship: str | None = None
    is_myself: bool = False
    avatar_url: str | None = None
    dietary_preferences: list[str] = Field(default_factory=list)


class LocationCategory(BackupRecord):
    name: str
    icon: str | None = None
    color: str | None = None
    is_default: bool = False


class ChecklistItem(BackupRecord):
    name: str
    description: str | None = None
    is_checked: bool = False
    is_default: bool = False
    sort_order: int = 0
    metadata: dict[str, Any] | None = None
    checked_at: dt.datetime | None = None


class Checklist(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"items"})

    name: str
    description: str | None = None
    type: str = "custom"
    is_default: bool = False
    sort_order: int = 0
    items: list[ChecklistItem] = Field(default_factory=list)


class TravelDocument(BackupRecord):
    """Travel document; ``document_number`` is masked in exported backups."""

    row_exclude: ClassVar[frozenset[str]] = frozenset({"document_number"})

    type: str
    issuing_country: str
    document_number: str | None = None
    issue_date: dt.date | None = None
    expiry_date: dt.date | None = None
    name: str | None = None
    notes: str | None = None
    is_primary: bool = False
    alert_days_before: int | None = None


class TripSeries(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id"})

    id: int
    name: str
    description: str | None = None


# ============================================================================
# Trip children
# ============================================================================


class Location(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id", "parent_id", "category"})

    id: int | None = None
    parent_id: int | None = None
    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    category: LocationCategory | None = None
    visit_datetime: dt.datetime | None = None
    visit_duration_minutes: int | None = None
    notes: str | None = None


class Photo(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id"})

    id: int | None = None
    source: str = "local"
    immich_asset_id: str | None = None
    local_path: str | None = None
    thumbnail_path: str | None = None
    caption: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    taken_at: dt.datetime | None = None


class Activity(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id", "parent_id"})

    id: int | None = None
    parent_id: int | None = None
    name: str
    description: str | None = None
    category: str | None = None
    all_day: bool = False
    start_time: dt.datetime | None = None
    end_time: dt.datetime | None = None
    timezone: str | None = None
    cost: float | None = None
    currency: str | None = None
    booking_url: str | None = None
    booking_reference: str | None = None
    notes: str | None = None
    manual_order: int | None = None


class FlightTracking(BackupRecord):
    flight_number: str | None = None
    airline_code: str | None = None
    status: str | None = None
    gate: str | None = None
    terminal: str | None = None
    baggage_claim: str | None = None


class Transportation(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset(
        {"id", "start_location_id", "end_location_id", "flight_tracking"}
    )

    id: int | None = None
    type: str
    start_location_id: int | None = None
    start_location_text: str | None = None
    end_location_id: int | None = None
    end_location_text: str | None = None
    scheduled_start: dt.datetime | None = None
    scheduled_end: dt.datetime | None = None
    start_timezone: str | None = None
    end_timezone: str | None = None
    actual_start: dt.datetime | None = None
    actual_end: dt.datetime | None = None
    company: str | None = None
    reference_number: str | None = None
    seat_number: str | None = None
    booking_reference: str | None = None
    booking_url: str | None = None
    cost: float | None = None
    currency: str | None = None
    status: str | None = None
    delay_minutes: int | None = None
    notes: str | None = None
    connection_group_id: str | None = None
    is_auto_generated: bool = False
    calculated_distance: float | None = None
    calculated_duration: float | None = None
    distance_source: str | None = None
    flight_tracking: FlightTracking | None = None


class Lodging(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id"})

    id: int | None = None
    type: str
    name: str
    address: str | None = None
    check_in_date: dt.datetime
    check_out_date: dt.datetime
    timezone: str | None = None
    confirmation_number: str | None = None
    booking_url: str | None = None
    cost: float | None = None
    currency: str | None = None
    notes: str | None = None


class JournalEntry(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id"})

    id: int | None = None
    date: dt.datetime | None = None
    title: str | None = None
    content: str
    entry_type: str | None = None
    mood: str | None = None
    weather_notes: str | None = None


class AlbumPhoto(BackupRecord):
    photo_id: int
    sort_order: int = 0


class PhotoAlbum(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"id", "cover_photo_id", "photos"})

    id: int | None = None
    name: str
    description: str | None = None
    cover_photo_id: int | None = None
    photos: list[AlbumPhoto] = Field(default_factory=list)


class WeatherData(BackupRecord):
    row_exclude: ClassVar[frozenset[str]] = frozenset({"location_id"})

    location_id: int | None = None
    date: dt.date
    temperature_high: float | None = None
    temperature_low: float | None = None
    conditions: str | None = None
    precipitation: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None


class EntityLink(BackupRecord):
    """Typed relationship between two entities of the same trip."""

    row_exclude: ClassVar[frozenset[str]] = frozenset({"source_id", "target_id"})

    source_type: EntityType
    source_id: int
    target_type: EntityType
    target_id: int
    relationship: str
    sort_order: int | None = None
    notes: str | None = None


class TripLanguage(BackupRecord):
    language_code: str
    language: str


class Trip(BackupRecord):
    """A trip together with every collection it owns."""

    row_exclude: ClassVar[frozenset[str]] = frozenset(
        {
            "id",
            "cover_photo_id",
            "banner_photo_id",
            "series_id",
            "series_order",
            "locations",
            "photos",
            "activities",
            "transportation",
            "lodging",
            "journal_entries",
            "photo_albums",
            "weather_data",
            "tags",
            "companions",
            "checklists",
            "entity_links",
            "trip_languages",
        }
    )

    id: int | None = None
    title: str
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    timezone: str | None = None
    status: str = "Planning"
    trip_type: str | None = None
    trip_type_emoji: str | None = None
    privacy_level: str = "Private"
    add_to_places_visited: bool = True
    cover_photo_id: int | None = None
    banner_photo_id: int | None = None
    series_id: int | None = None
    series_order: int | None = None

    locations: list[Location] = Field(default_factory=list)
    photos: list[Photo] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    transportation: list[Transportation] = Field(default_factory=list)
    lodging: list[Lodging] = Field(default_factory=list)
    journal_entries: list[JournalEntry] = Field(default_factory=list)
    photo_albums: list[PhotoAlbum] = Field(default_factory=list)
    weather_data: list[WeatherData] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    companions: list[str] = Field(default_factory=list)
    checklists: list[Checklist] = Field(default_factory=list)
    entity_links: list[EntityLink] = Field(default_factory=list)
    trip_languages: list[TripLanguage] = Field(default_factory=list)


class BackupDocument(BackupRecord):
    """Versioned snapshot of one user's full data graph."""

    version: str
    export_date: dt.datetime | None = None
    user: UserProfile = Field(default_factory=UserProfile)
    tags: list[Tag] = Field(default_factory=list)
    companions: list[Companion] = Field(default_factory=list)
    location_categories: list[LocationCategory] = Field(default_factory=list)
    checklists: list[Checklist] = Field(default_factory=list)
    travel_documents: list[TravelDocument] | None = None
    trip_series: list[TripSeries] | None = None
    trips: list[Trip] = Field(default_factory=list)


# ============================================================================
# Restore options and results
# ============================================================================


class RestoreOptions(BackupRecord):
    """How a restore treats existing data and photos."""

    clear_existing_data: bool = False
    import_photos: bool = True


class RestoreStats(BackupRecord):
    """Per-category counts of rows created by a restore."""

    trips_imported: int = 0
    locations_imported: int = 0
    photos_imported: int = 0
    activities_imported: int = 0
    transportation_imported: int = 0
    lodging_imported: int = 0
    journal_entries_imported: int = 0
    tags_imported: int = 0
    companions_imported: int = 0
    travel_documents_imported: int = 0
    trip_languages_imported: int = 0
    location_categories_imported: int = 0
    checklists_imported: int = 0
    trip_series_imported: int = 0
    photo_albums_imported: int = 0
    weather_data_imported: int = 0
    entity_links_imported: int = 0
    entity_links_skipped: int = 0


class RestoreResult(BackupRecord):
    success: bool
    message: str
    stats: RestoreStats
