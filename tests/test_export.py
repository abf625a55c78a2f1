"""Tests for create_backup() and backup file helpers."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from conftest import ALICE, BOB
from travel_backup.backup.errors import UserNotFoundError
from travel_backup.backup.export import (
    backup_filename,
    backup_to_dict,
    create_backup,
    get_backup_info,
    mask_document_number,
    write_backup,
)
from travel_backup.backup.integrity import verify_backup
from travel_backup.backup.restore import restore_from_backup


# ============================================================================
# Test: create_backup()
# ============================================================================


class TestCreateBackup:
    """Export reads every row owned by the user into one document."""

    @pytest.mark.asyncio
    async def test_empty_account(self, db) -> None:
        document = await create_backup(db, ALICE)

        assert document.version == "1.2.0"
        assert document.export_date is not None
        assert document.user.username == "alice"
        assert document.user.timezone == "UTC"
        assert document.user.activity_categories == []
        assert document.trips == []
        assert document.travel_documents == []
        assert document.trip_series == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, db) -> None:
        with pytest.raises(UserNotFoundError, match="User not found"):
            await create_backup(db, 404)

    @pytest.mark.asyncio
    async def test_storage_errors_propagate(self) -> None:
        adapter = AsyncMock()
        adapter.select = AsyncMock(side_effect=ConnectionError("connection refused"))

        with pytest.raises(ConnectionError, match="connection refused"):
            await create_backup(adapter, ALICE)

    @pytest.mark.asyncio
    async def test_only_own_rows_exported(self, db, full_backup) -> None:
        await restore_from_backup(db, ALICE, full_backup)

        document = await create_backup(db, BOB)

        assert document.trips == []
        assert document.tags == []

    @pytest.mark.asyncio
    async def test_decimals_become_floats(self, db) -> None:
        trip = await db.insert("trips", {"user_id": ALICE, "title": "Lisbon"})
        await db.insert(
            "activities",
            {"trip_id": trip["id"], "name": "Tram 28", "cost": Decimal("3.10")},
        )
        await db.insert(
            "locations",
            {"trip_id": trip["id"], "name": "Alfama", "latitude": Decimal("38.7117"), "longitude": Decimal("-9.1300")},
        )

        document = await create_backup(db, ALICE)
        data = backup_to_dict(document)

        activity = data["trips"][0]["activities"][0]
        location = data["trips"][0]["locations"][0]
        assert activity["cost"] == 3.1
        assert isinstance(activity["cost"], float)
        assert location["latitude"] == 38.7117

    @pytest.mark.asyncio
    async def test_document_numbers_masked(self, db) -> None:
        await db.insert(
            "travel_documents",
            {"user_id": ALICE, "type": "PASSPORT", "issuing_country": "PT", "document_number": "X1234567"},
        )
        await db.insert(
            "travel_documents",
            {"user_id": ALICE, "type": "VISA", "issuing_country": "JP", "document_number": "AB1"},
        )

        document = await create_backup(db, ALICE)

        numbers = [d.document_number for d in document.travel_documents]
        assert numbers == ["****4567", "****AB1"]

    @pytest.mark.asyncio
    async def test_nested_collections(self, db, full_backup) -> None:
        await restore_from_backup(db, ALICE, full_backup)

        document = await create_backup(db, ALICE)
        trip = document.trips[0]

        assert trip.title == "Rome"
        assert trip.locations[0].category.name == "Museum"
        assert trip.transportation[0].flight_tracking.flight_number == "AZ100"
        assert trip.photo_albums[0].photos[0].photo_id == trip.photos[0].id
        assert trip.tags == ["Beach"]
        assert trip.companions == ["Bob"]
        assert trip.checklists[0].items[0].name == "Book tickets"
        assert trip.trip_languages[0].language == "Italian"
        assert trip.series_id == document.trip_series[0].id
        assert trip.cover_photo_id == trip.photos[0].id
        assert [c.name for c in document.checklists] == ["Packing"]

    @pytest.mark.asyncio
    async def test_journal_time_of_day_exported(self, db, full_backup) -> None:
        full_backup["trips"][0]["journalEntries"][0]["date"] = "2024-07-02T14:31:22+00:00"
        await restore_from_backup(db, ALICE, full_backup)

        data = backup_to_dict(await create_backup(db, ALICE))

        assert data["trips"][0]["journalEntries"][0]["date"].startswith("2024-07-02T14:31:22")

    @pytest.mark.asyncio
    async def test_entity_link_ids_are_row_ids(self, db, full_backup) -> None:
        await restore_from_backup(db, ALICE, full_backup)

        trip = (await create_backup(db, ALICE)).trips[0]
        link = trip.entity_links[0]

        assert link.source_id == trip.activities[0].id
        assert link.target_id == trip.locations[0].id

    @pytest.mark.asyncio
    async def test_default_category_snapshot(self, db) -> None:
        category = await db.insert("location_categories", {"user_id": None, "name": "Restaurant"})
        trip = await db.insert("trips", {"user_id": ALICE, "title": "Paris"})
        await db.insert(
            "locations", {"trip_id": trip["id"], "name": "Bistro", "category_id": category["id"]}
        )

        document = await create_backup(db, ALICE)

        assert document.location_categories == []
        assert document.trips[0].locations[0].category.name == "Restaurant"


# ============================================================================
# Test: export -> restore -> export
# ============================================================================


class TestRoundTrip:
    """Restoring an export into another account reproduces the data."""

    @pytest.mark.asyncio
    async def test_round_trip_preserves_graph(self, db, full_backup) -> None:
        await restore_from_backup(db, ALICE, full_backup)
        first = await create_backup(db, ALICE)

        result = await restore_from_backup(db, BOB, backup_to_dict(first))
        second = await create_backup(db, BOB)

        assert result.stats.trips_imported == 1
        assert result.stats.entity_links_skipped == 0

        a, b = first.trips[0], second.trips[0]
        assert a.title == b.title
        assert [loc.name for loc in a.locations] == [loc.name for loc in b.locations]
        assert a.activities[0].cost == b.activities[0].cost == 25.5
        assert a.lodging[0].check_in_date == b.lodging[0].check_in_date
        assert a.journal_entries[0].date == b.journal_entries[0].date
        assert b.entity_links[0].source_id == b.activities[0].id
        assert b.entity_links[0].target_id == b.locations[0].id
        assert b.photo_albums[0].photos[0].photo_id == b.photos[0].id
        assert [t.name for t in second.tags] == ["Beach"]

    @pytest.mark.asyncio
    async def test_round_trip_through_file(self, db, full_backup, tmp_path: Path) -> None:
        await restore_from_backup(db, ALICE, full_backup)
        path = write_backup(await create_backup(db, ALICE), str(tmp_path / "b.json"))

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        result = await restore_from_backup(db, BOB, data)

        assert result.success is True
        assert result.stats.photos_imported == 1


# ============================================================================
# Test: file helpers
# ============================================================================


class TestFileHelpers:
    """Filename, JSON shape, writing and signing."""

    def test_mask_document_number(self) -> None:
        assert mask_document_number(None) is None
        assert mask_document_number("") is None
        assert mask_document_number("12") == "****12"
        assert mask_document_number("1234") == "****1234"
        assert mask_document_number("12345") == "****2345"

    def test_backup_filename(self) -> None:
        assert backup_filename(date(2026, 1, 15)) == "travel-life-backup-2026-01-15.json"

    def test_backup_info(self) -> None:
        assert get_backup_info() == {"version": "1.0.0", "supportedFormats": ["json"]}

    @pytest.mark.asyncio
    async def test_dict_uses_camel_case(self, db, full_backup) -> None:
        await restore_from_backup(db, ALICE, full_backup)

        data = backup_to_dict(await create_backup(db, ALICE))

        assert data["version"] == "1.2.0"
        assert "exportDate" in data
        assert "locationCategories" in data
        assert "tripSeries" in data
        trip = data["trips"][0]
        assert "journalEntries" in trip
        assert "flightTracking" in trip["transportation"][0]
        assert trip["entityLinks"][0]["sourceType"] == "ACTIVITY"
        assert trip["lodging"][0]["checkInDate"].startswith("2026-05-01T14:00:00")

    @pytest.mark.asyncio
    async def test_write_default_path(self, db, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

        path = write_backup(await create_backup(db, ALICE))

        assert Path(path).parent == tmp_path / "backups"
        assert Path(path).name == backup_filename()
        assert json.loads(Path(path).read_text(encoding="utf-8"))["user"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_write_signed(self, db, tmp_path: Path) -> None:
        path = write_backup(
            await create_backup(db, ALICE), str(tmp_path / "nested" / "b.json"), secret="k"
        )

        data = json.loads(Path(path).read_text(encoding="utf-8"))
        assert data["integrity"]["algorithm"] == "hmac-sha256"
        payload, verified = verify_backup(data, "k")
        assert verified is True
        assert "integrity" not in payload
