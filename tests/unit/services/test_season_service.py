"""Tests for season import and export."""

import pytest

from equine_center.errors import ImportFormatError, SeasonMismatchError
from equine_center.repositories import (
    AssignmentRepository,
    HorseRepository,
    LocationRepository,
    OwnerRepository,
)
from equine_center.services.csv_io import read_csv_rows
from equine_center.services.season_service import (
    SEASON_CSV_COLUMNS,
    SeasonContext,
    SeasonService,
)

from tests.fixtures.factories import BASE_TIME

CONTEXT = SeasonContext("2024", "Del Mar")

CSV_HEADER = "Season,Racetrack,HorseName,OwnerName,OwnerEmail,Age,Gender,TrackingID,LocationName,LocationType\n"


class TestSeasonContext:
    """Tests for SeasonContext.check."""

    def test_matching_context(self):
        """Matching season and racetrack pass."""
        CONTEXT.check("2024", "Del Mar", "CSV")

    def test_season_mismatch_message(self):
        """A different season names both seasons."""
        with pytest.raises(SeasonMismatchError) as exc_info:
            CONTEXT.check("2023", "Del Mar", "CSV")

        assert exc_info.value.message == (
            "CSV is for season 2023, but you have 2024 selected. "
            "Please switch to the correct season first."
        )

    def test_racetrack_mismatch(self):
        """A different racetrack is rejected too."""
        with pytest.raises(SeasonMismatchError) as exc_info:
            CONTEXT.check("2024", "Santa Anita", "JSON")

        assert exc_info.value.details == {"expected": "Del Mar", "found": "Santa Anita"}

    def test_default_from_settings(self, test_settings):
        """The default context comes from settings."""
        assert SeasonContext.default(test_settings) == SeasonContext("2024", "Del Mar")


class TestSeasonExport:
    """Tests for season exports."""

    @pytest.mark.asyncio
    async def test_csv_export(self, db_session, test_settings, stable):
        """CSV export has one row per horse stamped with the season."""
        service = SeasonService(db_session, test_settings)

        text = await service.export_season_csv(CONTEXT)

        assert text.splitlines()[0] == ",".join(SEASON_CSV_COLUMNS)
        rows = read_csv_rows(text, SEASON_CSV_COLUMNS)
        assert len(rows) == 5
        assert {r["Season"] for r in rows} == {"2024"}
        assert rows[0]["TrackingID"] == "DM20240001"
        assert rows[0]["LocationName"] == "Main Track"
        assert rows[0]["LocationType"] == "track"

    @pytest.mark.asyncio
    async def test_json_export(self, db_session, test_settings, stable):
        """JSON export carries every collection and the export date."""
        service = SeasonService(db_session, test_settings)

        document = await service.export_season_json(CONTEXT, now=BASE_TIME)

        assert document["season"] == "2024"
        assert document["exportDate"] == "2024-07-20T12:00:00"
        assert len(document["horses"]) == 5
        assert len(document["owners"]) == 2
        assert len(document["locations"]) == 3


class TestSeasonImport:
    """Tests for season imports."""

    @pytest.mark.asyncio
    async def test_json_round_trip_creates_no_duplicates(self, db_session, test_settings, stable):
        """Re-importing an export into the same data set writes nothing."""
        service = SeasonService(db_session, test_settings)
        document = await service.export_season_json(CONTEXT)

        summary = await service.import_season_json(CONTEXT, document)

        assert summary.owners_created == 0
        assert summary.locations_created == 0
        assert summary.horses_created == 0
        assert summary.horses_skipped == 5

    @pytest.mark.asyncio
    async def test_json_import_into_empty_store(self, db_session, test_settings, stable):
        """Imported horses keep their owner and location links."""
        document = await SeasonService(db_session, test_settings).export_season_json(CONTEXT)
        await db_session.rollback()

        summary = await SeasonService(db_session, test_settings).import_season_json(
            CONTEXT, document
        )

        assert (summary.owners_created, summary.locations_created, summary.horses_created) == (
            2,
            3,
            5,
        )
        horse = await HorseRepository(db_session).get_by_tracking_id("DM20240001")
        owner = await OwnerRepository(db_session).get(horse.owner_id)
        location = await LocationRepository(db_session).get(horse.current_location_id)
        assert owner.email == "john@smithracing.com"
        assert location.name == "Main Track"
        assignments = await AssignmentRepository(db_session).get_by_horse(horse.id)
        assert [a.location_id for a in assignments] == [location.id]

    @pytest.mark.asyncio
    async def test_json_mismatch_writes_nothing(self, db_session, test_settings):
        """A document for another season is rejected before any write."""
        service = SeasonService(db_session, test_settings)
        document = {
            "season": "2023",
            "racetrack": "Del Mar",
            "owners": [{"id": 1, "name": "New", "email": "new@example.com"}],
        }

        with pytest.raises(SeasonMismatchError):
            await service.import_season_json(CONTEXT, document)

        assert await OwnerRepository(db_session).count() == 0

    @pytest.mark.asyncio
    async def test_json_unknown_owner_reference(self, db_session, test_settings):
        """Horses must reference an owner present in the document."""
        service = SeasonService(db_session, test_settings)
        document = {
            "season": "2024",
            "racetrack": "Del Mar",
            "horses": [{"id": 1, "tracking_id": "DM20240001", "name": "Stray", "owner_id": 9}],
        }

        with pytest.raises(ImportFormatError):
            await service.import_season_json(CONTEXT, document)

    @pytest.mark.asyncio
    async def test_json_malformed(self, db_session, test_settings):
        """Documents without season fields are format errors."""
        service = SeasonService(db_session, test_settings)

        with pytest.raises(ImportFormatError):
            await service.import_season_json(CONTEXT, {"horses": []})

    @pytest.mark.asyncio
    async def test_csv_import(self, db_session, test_settings, stable):
        """CSV rows reuse existing owners and locations by natural key."""
        service = SeasonService(db_session, test_settings)
        text = CSV_HEADER + (
            "2024,Del Mar,Seabiscuit,John Smith Racing,john@smithracing.com,4,colt,,Barn A,barn\n"
            "2024,Del Mar,Zenyatta,Moss Stables,moss@example.com,5,mare,DM20240777,Paddock 9,paddock\n"
            "2024,Del Mar,Thunder Bolt,John Smith Racing,john@smithracing.com,4,,DM20240001,,\n"
        )

        summary = await service.import_season_csv(CONTEXT, text)

        assert summary.owners_created == 1
        assert summary.locations_created == 1
        assert summary.horses_created == 2
        assert summary.horses_skipped == 1
        zenyatta = await HorseRepository(db_session).get_by_tracking_id("DM20240777")
        paddock = await LocationRepository(db_session).get_by_name("Paddock 9")
        assert zenyatta.gender == "mare"
        assert zenyatta.current_location_id == paddock.id
        assert paddock.capacity == 50

    @pytest.mark.asyncio
    async def test_csv_mismatch_in_later_row(self, db_session, test_settings):
        """Every row is checked; a late mismatch still writes nothing."""
        service = SeasonService(db_session, test_settings)
        text = CSV_HEADER + (
            "2024,Del Mar,Seabiscuit,New Stables,new@example.com,4,,,,\n"
            "2023,Del Mar,War Admiral,New Stables,new@example.com,5,,,,\n"
        )

        with pytest.raises(SeasonMismatchError):
            await service.import_season_csv(CONTEXT, text)

        assert await OwnerRepository(db_session).count() == 0

    @pytest.mark.asyncio
    async def test_csv_bad_location_type(self, db_session, test_settings):
        """Unknown location types are format errors."""
        service = SeasonService(db_session, test_settings)
        text = CSV_HEADER + "2024,Del Mar,Seabiscuit,New,new@example.com,4,,,Dock,harbour\n"

        with pytest.raises(ImportFormatError) as exc_info:
            await service.import_season_csv(CONTEXT, text)

        assert "harbour" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_csv_empty(self, db_session, test_settings):
        """Header-only files are rejected."""
        service = SeasonService(db_session, test_settings)

        with pytest.raises(ImportFormatError) as exc_info:
            await service.import_season_csv(CONTEXT, CSV_HEADER)

        assert exc_info.value.message == "CSV file is empty"
