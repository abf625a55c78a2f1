"""Relational schema of the travel journal.

SQLAlchemy Core tables on a single ``metadata``.  Column names are the
snake_case forms of the backup document's camelCase keys, which lets the
backup models move values between rows and JSON without a field map.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB

metadata = MetaData()

JsonColumn = JSON().with_variant(JSONB(), "postgresql")
Money = Numeric(12, 2)
Coordinate = Numeric(10, 7)


def _pk() -> Column:
    return Column("id", Integer, primary_key=True, autoincrement=True)


def _user_fk(nullable: bool = False) -> Column:
    return Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=nullable,
        index=True,
    )


def _trip_fk(nullable: bool = False) -> Column:
    return Column(
        "trip_id",
        Integer,
        ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=nullable,
        index=True,
    )


users = Table(
    "users",
    metadata,
    _pk(),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("timezone", String(64)),
    Column("activity_categories", JsonColumn),
    Column("trip_types", JsonColumn),
    Column("immich_api_url", Text),
    Column("immich_api_key", Text),
    Column("weather_api_key", Text),
    Column("aviationstack_api_key", Text),
    Column("openrouteservice_api_key", Text),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)

trip_tags = Table(
    "trip_tags",
    metadata,
    _pk(),
    _user_fk(),
    Column("name", String(255), nullable=False),
    Column("color", String(32)),
    Column("text_color", String(32)),
)

travel_companions = Table(
    "travel_companions",
    metadata,
    _pk(),
    _user_fk(),
    Column("name", String(255), nullable=False),
    Column("email", String(255)),
    Column("phone", String(64)),
    Column("notes", Text),
    Column("relationship", String(64)),
    Column("is_myself", Boolean, nullable=False, server_default="false"),
    Column("avatar_url", Text),
    Column("dietary_preferences", JsonColumn),
)

location_categories = Table(
    "location_categories",
    metadata,
    _pk(),
    _user_fk(nullable=True),
    Column("name", String(255), nullable=False),
    Column("icon", String(64)),
    Column("color", String(32)),
    Column("is_default", Boolean, nullable=False, server_default="false"),
)

travel_documents = Table(
    "travel_documents",
    metadata,
    _pk(),
    _user_fk(),
    Column("type", String(32), nullable=False),
    Column("issuing_country", String(64), nullable=False),
    Column("document_number", String(128)),
    Column("issue_date", Date),
    Column("expiry_date", Date),
    Column("name", String(255)),
    Column("notes", Text),
    Column("is_primary", Boolean, nullable=False, server_default="false"),
    Column("alert_days_before", Integer),
)

trip_series = Table(
    "trip_series",
    metadata,
    _pk(),
    _user_fk(),
    Column("name", String(255), nullable=False),
    Column("description", Text),
)

trips = Table(
    "trips",
    metadata,
    _pk(),
    _user_fk(),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("timezone", String(64)),
    Column("status", String(32), nullable=False),
    Column("trip_type", String(64)),
    Column("trip_type_emoji", String(32)),
    Column("privacy_level", String(32), nullable=False),
    Column("add_to_places_visited", Boolean, nullable=False, server_default="true"),
    Column(
        "cover_photo_id",
        Integer,
        ForeignKey(
            "photos.id", ondelete="SET NULL", use_alter=True, name="fk_trips_cover_photo"
        ),
    ),
    Column(
        "banner_photo_id",
        Integer,
        ForeignKey(
            "photos.id", ondelete="SET NULL", use_alter=True, name="fk_trips_banner_photo"
        ),
    ),
    Column("series_id", Integer, ForeignKey("trip_series.id", ondelete="SET NULL")),
    Column("series_order", Integer),
)

checklists = Table(
    "checklists",
    metadata,
    _pk(),
    _user_fk(),
    _trip_fk(nullable=True),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("type", String(32), nullable=False),
    Column("is_default", Boolean, nullable=False, server_default="false"),
    Column("sort_order", Integer, nullable=False, server_default="0"),
)

checklist_items = Table(
    "checklist_items",
    metadata,
    _pk(),
    Column(
        "checklist_id",
        Integer,
        ForeignKey("checklists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("is_checked", Boolean, nullable=False, server_default="false"),
    Column("is_default", Boolean, nullable=False, server_default="false"),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    Column("metadata", JsonColumn),
    Column("checked_at", DateTime(timezone=True)),
)

locations = Table(
    "locations",
    metadata,
    _pk(),
    _trip_fk(),
    Column("parent_id", Integer, ForeignKey("locations.id", ondelete="SET NULL")),
    Column("name", String(255), nullable=False),
    Column("address", Text),
    Column("latitude", Coordinate),
    Column("longitude", Coordinate),
    Column(
        "category_id",
        Integer,
        ForeignKey("location_categories.id", ondelete="SET NULL"),
    ),
    Column("visit_datetime", DateTime(timezone=True)),
    Column("visit_duration_minutes", Integer),
    Column("notes", Text),
)

photos = Table(
    "photos",
    metadata,
    _pk(),
    _trip_fk(),
    Column("source", String(32), nullable=False),
    Column("immich_asset_id", String(255)),
    Column("local_path", Text),
    Column("thumbnail_path", Text),
    Column("caption", Text),
    Column("latitude", Coordinate),
    Column("longitude", Coordinate),
    Column("taken_at", DateTime(timezone=True)),
)

activities = Table(
    "activities",
    metadata,
    _pk(),
    _trip_fk(),
    Column("parent_id", Integer, ForeignKey("activities.id", ondelete="SET NULL")),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("category", String(255)),
    Column("all_day", Boolean, nullable=False, server_default="false"),
    Column("start_time", DateTime(timezone=True)),
    Column("end_time", DateTime(timezone=True)),
    Column("timezone", String(64)),
    Column("cost", Money),
    Column("currency", String(8)),
    Column("booking_url", Text),
    Column("booking_reference", String(255)),
    Column("notes", Text),
    Column("manual_order", Integer),
)

transportation = Table(
    "transportation",
    metadata,
    _pk(),
    _trip_fk(),
    Column("type", String(32), nullable=False),
    Column("start_location_id", Integer, ForeignKey("locations.id", ondelete="SET NULL")),
    Column("start_location_text", Text),
    Column("end_location_id", Integer, ForeignKey("locations.id", ondelete="SET NULL")),
    Column("end_location_text", Text),
    Column("scheduled_start", DateTime(timezone=True)),
    Column("scheduled_end", DateTime(timezone=True)),
    Column("start_timezone", String(64)),
    Column("end_timezone", String(64)),
    Column("actual_start", DateTime(timezone=True)),
    Column("actual_end", DateTime(timezone=True)),
    Column("company", String(255)),
    Column("reference_number", String(255)),
    Column("seat_number", String(32)),
    Column("booking_reference", String(255)),
    Column("booking_url", Text),
    Column("cost", Money),
    Column("currency", String(8)),
    Column("status", String(32)),
    Column("delay_minutes", Integer),
    Column("notes", Text),
    Column("connection_group_id", String(64)),
    Column("is_auto_generated", Boolean, nullable=False, server_default="false"),
    Column("calculated_distance", Float),
    Column("calculated_duration", Float),
    Column("distance_source", String(32)),
)

flight_tracking = Table(
    "flight_tracking",
    metadata,
    _pk(),
    Column(
        "transportation_id",
        Integer,
        ForeignKey("transportation.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("flight_number", String(16)),
    Column("airline_code", String(8)),
    Column("status", String(32)),
    Column("gate", String(16)),
    Column("terminal", String(16)),
    Column("baggage_claim", String(16)),
)

lodging = Table(
    "lodging",
    metadata,
    _pk(),
    _trip_fk(),
    Column("type", String(32), nullable=False),
    Column("name", String(255), nullable=False),
    Column("address", Text),
    Column("check_in_date", DateTime(timezone=True), nullable=False),
    Column("check_out_date", DateTime(timezone=True), nullable=False),
    Column("timezone", String(64)),
    Column("confirmation_number", String(255)),
    Column("booking_url", Text),
    Column("cost", Money),
    Column("currency", String(8)),
    Column("notes", Text),
)

journal_entries = Table(
    "journal_entries",
    metadata,
    _pk(),
    _trip_fk(),
    Column("date", DateTime(timezone=True)),
    Column("title", String(255)),
    Column("content", Text, nullable=False),
    Column("entry_type", String(32)),
    Column("mood", String(32)),
    Column("weather_notes", Text),
)

photo_albums = Table(
    "photo_albums",
    metadata,
    _pk(),
    _trip_fk(),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("cover_photo_id", Integer, ForeignKey("photos.id", ondelete="SET NULL")),
)

photo_album_assignments = Table(
    "photo_album_assignments",
    metadata,
    _pk(),
    Column(
        "album_id",
        Integer,
        ForeignKey("photo_albums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("photo_id", Integer, ForeignKey("photos.id", ondelete="CASCADE"), nullable=False),
    Column("sort_order", Integer, nullable=False, server_default="0"),
    UniqueConstraint("album_id", "photo_id"),
)

weather_data = Table(
    "weather_data",
    metadata,
    _pk(),
    _trip_fk(),
    Column("location_id", Integer, ForeignKey("locations.id", ondelete="SET NULL")),
    Column("date", Date, nullable=False),
    Column("temperature_high", Float),
    Column("temperature_low", Float),
    Column("conditions", String(255)),
    Column("precipitation", Float),
    Column("humidity", Float),
    Column("wind_speed", Float),
)

trip_tag_assignments = Table(
    "trip_tag_assignments",
    metadata,
    _pk(),
    _trip_fk(),
    Column("tag_id", Integer, ForeignKey("trip_tags.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("trip_id", "tag_id"),
)

trip_companions = Table(
    "trip_companions",
    metadata,
    _pk(),
    _trip_fk(),
    Column(
        "companion_id",
        Integer,
        ForeignKey("travel_companions.id", ondelete="CASCADE"),
        nullable=False,
    ),
    UniqueConstraint("trip_id", "companion_id"),
)

entity_links = Table(
    "entity_links",
    metadata,
    _pk(),
    _trip_fk(),
    Column("source_type", String(32), nullable=False),
    Column("source_id", Integer, nullable=False),
    Column("target_type", String(32), nullable=False),
    Column("target_id", Integer, nullable=False),
    Column("relationship", String(64), nullable=False),
    Column("sort_order", Integer),
    Column("notes", Text),
)

trip_languages = Table(
    "trip_languages",
    metadata,
    _pk(),
    _trip_fk(),
    Column("language_code", String(16), nullable=False),
    Column("language", String(64), nullable=False),
)

JSONB_COLUMNS: frozenset[str] = frozenset(
    column.name
    for table in metadata.tables.values()
    for column in table.columns
    if isinstance(column.type, JSON)
)
