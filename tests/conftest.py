"""Shared fixtures: an in-memory database with two users and sample backups."""

import copy

import pytest
import pytest_asyncio

from travel_backup.adapters.memory import InMemoryAdapter
from travel_backup.schema import metadata

ALICE = 1
BOB = 2


# ------------------------------------------------------------------
# Sample backup documents
# ------------------------------------------------------------------

_FULL_BACKUP: dict = {
    "version": "1.2.0",
    "exportDate": "2026-01-15T10:00:00+00:00",
    "user": {
        "username": "alice",
        "email": "alice@example.com",
        "timezone": "Europe/Rome",
        "activityCategories": [{"name": "Food", "emoji": "🍝"}],
        "immichApiUrl": "https://photos.example.com",
        "immichApiKey": "immich-key",
        "weatherApiKey": "weather-key",
    },
    "tags": [{"name": "Beach", "color": "#0000ff", "textColor": "#ffffff"}],
    "companions": [{"name": "Bob", "relationship": "friend"}],
    "locationCategories": [{"name": "Museum", "icon": "museum", "color": "#aa0000"}],
    "checklists": [
        {"name": "Packing", "type": "custom", "items": [{"name": "Passport"}]}
    ],
    "travelDocuments": [
        {
            "type": "PASSPORT",
            "issuingCountry": "IT",
            "documentNumber": "****4567",
            "name": "Main passport",
            "expiryDate": "2030-01-01",
        }
    ],
    "tripSeries": [{"id": 5, "name": "Italy", "description": "Every spring"}],
    "trips": [
        {
            "id": 10,
            "title": "Rome",
            "startDate": "2026-05-01",
            "endDate": "2026-05-07",
            "status": "Planned",
            "coverPhotoId": 30,
            "seriesId": 5,
            "seriesOrder": 1,
            "locations": [
                {
                    "id": 20,
                    "name": "Colosseum",
                    "latitude": 41.8902,
                    "longitude": 12.4922,
                    "category": {"name": "Museum", "icon": "museum"},
                }
            ],
            "photos": [
                {"id": 30, "source": "local", "localPath": "/photos/1.jpg", "caption": "Arena"}
            ],
            "activities": [
                {"id": 40, "name": "Guided tour", "cost": 25.5, "currency": "EUR"}
            ],
            "transportation": [
                {
                    "id": 50,
                    "type": "flight",
                    "endLocationId": 20,
                    "flightTracking": {"flightNumber": "AZ100", "airlineCode": "AZ"},
                }
            ],
            "lodging": [
                {
                    "id": 60,
                    "type": "hotel",
                    "name": "Hotel Roma",
                    "checkInDate": "2026-05-01T14:00:00+00:00",
                    "checkOutDate": "2026-05-07T10:00:00+00:00",
                }
            ],
            "journalEntries": [
                {"id": 70, "date": "2026-05-02T19:30:00+00:00", "title": "Day 1", "content": "Saw the arena"}
            ],
            "photoAlbums": [
                {
                    "id": 80,
                    "name": "Best of",
                    "coverPhotoId": 30,
                    "photos": [{"photoId": 30, "sortOrder": 0}],
                }
            ],
            "weatherData": [
                {"locationId": 20, "date": "2026-05-02", "temperatureHigh": 24.0}
            ],
            "tags": ["Beach"],
            "companions": ["Bob"],
            "checklists": [{"name": "Rome todo", "items": [{"name": "Book tickets"}]}],
            "entityLinks": [
                {
                    "sourceType": "ACTIVITY",
                    "sourceId": 40,
                    "targetType": "LOCATION",
                    "targetId": 20,
                    "relationship": "TAKES_PLACE_AT",
                }
            ],
            "tripLanguages": [{"languageCode": "it", "language": "Italian"}],
        }
    ],
}


def make_full_backup(version: str = "1.2.0") -> dict:
    """A backup with one record of every kind (deep copy, safe to mutate)."""
    data = copy.deepcopy(_FULL_BACKUP)
    data["version"] = version
    return data


def make_trip(trip_id: int = 1, title: str = "Trip", **collections) -> dict:
    """A minimal trip dict with the given nested collections."""
    return {"id": trip_id, "title": title, **collections}


@pytest.fixture
def full_backup() -> dict:
    return make_full_backup()


@pytest.fixture
def minimal_backup() -> dict:
    return {"version": "1.2.0", "user": {}, "trips": []}


# ------------------------------------------------------------------
# Database
# ------------------------------------------------------------------


@pytest_asyncio.fixture
async def db() -> InMemoryAdapter:
    """In-memory database with users alice (1) and bob (2)."""
    adapter = InMemoryAdapter()
    await adapter.create_schema(metadata)
    await adapter.insert(
        "users",
        {"id": ALICE, "username": "alice", "email": "alice@example.com", "timezone": "UTC"},
    )
    await adapter.insert(
        "users",
        {"id": BOB, "username": "bob", "email": "bob@example.com", "timezone": "Asia/Tokyo"},
    )
    return adapter
