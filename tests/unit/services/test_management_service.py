"""Tests for management service."""

import random
import re
from datetime import datetime, timedelta, timezone

import pytest

from equine_center.errors import (
    DuplicateEmailError,
    DuplicateTrackingIdError,
    ImportFormatError,
    NotFoundError,
    OwnerHasHorsesError,
    TrackingIdExhaustedError,
    ValidationError,
)
from equine_center.models import LocationAssignment, utc_now
from equine_center.repositories import HorseRepository, OwnerRepository
from equine_center.schemas import HorseCreate, HorseUpdate, OwnerCreate, OwnerUpdate
from equine_center.services.csv_io import read_csv_rows
from equine_center.services.management_service import HORSE_CSV_COLUMNS, ManagementService

from tests.fixtures.factories import BASE_TIME


class FixedRandom(random.Random):
    """Returns the queued numbers in order, then repeats the last one."""

    def __init__(self, *numbers):
        super().__init__()
        self.numbers = list(numbers)

    def randint(self, a, b):
        return self.numbers.pop(0) if len(self.numbers) > 1 else self.numbers[0]


class TestGenerateTrackingId:
    """Tests for generate_tracking_id."""

    @pytest.mark.asyncio
    async def test_format(self, db_session, test_settings):
        """IDs are prefix, year and a four-digit number."""
        service = ManagementService(db_session, test_settings, rng=FixedRandom(42))

        tracking_id = await service.generate_tracking_id(now=BASE_TIME)

        assert tracking_id == "DM20240042"
        assert re.fullmatch(r"DM\d{4}\d{4}", tracking_id)

    @pytest.mark.asyncio
    async def test_skips_existing_and_reserved(self, db_session, test_settings, stable):
        """Stored and reserved IDs are never returned."""
        service = ManagementService(db_session, test_settings, rng=FixedRandom(1, 7, 8))

        tracking_id = await service.generate_tracking_id({"DM20240007"}, now=BASE_TIME)

        assert tracking_id == "DM20240008"

    @pytest.mark.asyncio
    async def test_exhaustion(self, db_session, test_settings, stable):
        """Every attempt colliding raises TrackingIdExhaustedError."""
        test_settings.tracking_id_max_attempts = 5
        service = ManagementService(db_session, test_settings, rng=FixedRandom(1))

        with pytest.raises(TrackingIdExhaustedError) as exc_info:
            await service.generate_tracking_id(now=BASE_TIME)

        assert exc_info.value.message == "Failed to generate unique tracking ID after 5 attempts"


class TestHorseManagement:
    """Tests for adding and updating horses."""

    @pytest.mark.asyncio
    async def test_add_horse(self, db_session, test_settings, test_owner):
        """Added horses get a generated tracking ID."""
        service = ManagementService(db_session, test_settings)

        horse = await service.add_horse(HorseCreate(name="Seabiscuit", owner_id=test_owner.id))

        assert horse.id is not None
        assert horse.tracking_id.startswith(f"DM{utc_now().year}")
        assert horse.status == "active"
        assert horse.gender == "gelding"

    @pytest.mark.asyncio
    async def test_add_horse_unknown_owner(self, db_session, test_settings):
        """Horses must reference an existing owner."""
        service = ManagementService(db_session, test_settings)

        with pytest.raises(ValidationError):
            await service.add_horse(HorseCreate(name="Stray", owner_id=999))

    @pytest.mark.asyncio
    async def test_add_horse_with_tracking_id(self, db_session, test_settings, stable):
        """A supplied tracking ID is kept when free and rejected when taken."""
        service = ManagementService(db_session, test_settings)
        owner_id = stable.owners[0].id

        horse = await service.add_horse(
            HorseCreate(name="Newcomer", owner_id=owner_id, tracking_id="DM20249999")
        )
        with pytest.raises(DuplicateTrackingIdError) as exc_info:
            await service.add_horse(
                HorseCreate(name="Copycat", owner_id=owner_id, tracking_id="DM20240001")
            )

        assert horse.tracking_id == "DM20249999"
        assert exc_info.value.details == {"tracking_id": "DM20240001"}
        assert len(await HorseRepository(db_session).get_by_owner(owner_id)) == 3

    @pytest.mark.asyncio
    async def test_update_horse(self, db_session, test_settings, stable):
        """Only the provided fields change."""
        service = ManagementService(db_session, test_settings)

        horse = await service.update_horse(
            stable.wanderer.id, HorseUpdate(status="injured", current_activity="medical")
        )

        assert horse.status == "injured"
        assert horse.current_activity == "medical"
        assert horse.name == "Wanderer"

    @pytest.mark.asyncio
    async def test_update_missing_horse(self, db_session, test_settings):
        """Updating an unknown horse raises NotFoundError."""
        service = ManagementService(db_session, test_settings)

        with pytest.raises(NotFoundError):
            await service.update_horse(999, HorseUpdate(name="Ghost"))


class TestOwnerManagement:
    """Tests for owner rules."""

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session, test_settings, stable):
        """Owner emails are unique."""
        service = ManagementService(db_session, test_settings)

        with pytest.raises(DuplicateEmailError):
            await service.add_owner(OwnerCreate(name="Copy", email="john@smithracing.com"))

    @pytest.mark.asyncio
    async def test_update_keeps_own_email(self, db_session, test_settings, stable):
        """An owner may be saved with its current email."""
        service = ManagementService(db_session, test_settings)
        john, golden = stable.owners

        owner = await service.update_owner(
            john.id, OwnerUpdate(email="john@smithracing.com", phone="555-9999")
        )
        assert owner.phone == "555-9999"

        with pytest.raises(DuplicateEmailError):
            await service.update_owner(golden.id, OwnerUpdate(email="john@smithracing.com"))

    @pytest.mark.asyncio
    async def test_delete_owner_with_horses_rejected(self, db_session, test_settings, stable):
        """The whole batch fails when any owner still has horses."""
        service = ManagementService(db_session, test_settings)
        idle = await service.add_owner(OwnerCreate(name="Idle", email="idle@example.com"))
        john = stable.owners[0]

        with pytest.raises(OwnerHasHorsesError) as exc_info:
            await service.delete_owners([idle.id, john.id])

        assert exc_info.value.details == {"owner_ids": [john.id]}
        assert await OwnerRepository(db_session).get(idle.id) is not None

    @pytest.mark.asyncio
    async def test_delete_owner_after_horses(self, db_session, test_settings, stable):
        """Owners can be deleted once their horses are gone."""
        service = ManagementService(db_session, test_settings)
        john = stable.owners[0]

        assert await service.delete_owner_horses(john.id) == 2
        assert await service.delete_owners([john.id]) == 1
        assert await OwnerRepository(db_session).get(john.id) is None


class TestAssignLocation:
    """Tests for assign_location."""

    @pytest.mark.asyncio
    async def test_open_assignment_updates_horse(self, db_session, test_settings, stable):
        """An open-ended assignment moves the horse's cached location."""
        service = ManagementService(db_session, test_settings)
        medical = stable.locations[2]

        assignment = await service.assign_location(
            stable.lame_duck.id, medical.id, assigned_by=1, notes="Vet check"
        )

        assert isinstance(assignment, LocationAssignment)
        assert assignment.notes == "Vet check"
        horse = await HorseRepository(db_session).get(stable.lame_duck.id)
        assert horse.current_location_id == medical.id

    @pytest.mark.asyncio
    async def test_past_assignment_keeps_cache(self, db_session, test_settings, stable):
        """An assignment that already ended does not move the horse."""
        service = ManagementService(db_session, test_settings)
        start = utc_now() - timedelta(days=3)

        await service.assign_location(
            stable.wanderer.id,
            stable.locations[0].id,
            assigned_at=start,
            assigned_until=start + timedelta(days=1),
        )

        horse = await HorseRepository(db_session).get(stable.wanderer.id)
        assert horse.current_location_id is None

    @pytest.mark.asyncio
    async def test_offset_aware_times_are_converted(self, db_session, test_settings, stable):
        """Offset-aware datetimes are compared and stored as naive UTC."""
        service = ManagementService(db_session, test_settings)
        plus_two = timezone(timedelta(hours=2))

        assignment = await service.assign_location(
            stable.wanderer.id,
            stable.locations[0].id,
            assigned_at=datetime(2024, 7, 20, 14, 0, tzinfo=plus_two),
            assigned_until=datetime(2099, 1, 1, tzinfo=timezone.utc),
        )

        assert assignment.assigned_at == BASE_TIME
        assert assignment.assigned_until == datetime(2099, 1, 1)
        horse = await HorseRepository(db_session).get(stable.wanderer.id)
        assert horse.current_location_id == stable.locations[0].id

    @pytest.mark.asyncio
    async def test_invalid_references(self, db_session, test_settings, stable):
        """Unknown horses, unknown locations and reversed ranges are rejected."""
        service = ManagementService(db_session, test_settings)

        with pytest.raises(NotFoundError):
            await service.assign_location(999, stable.locations[0].id)
        with pytest.raises(ValidationError):
            await service.assign_location(stable.wanderer.id, 999)
        with pytest.raises(ValidationError):
            await service.assign_location(
                stable.wanderer.id,
                stable.locations[0].id,
                assigned_at=BASE_TIME,
                assigned_until=BASE_TIME,
            )


class TestHorseCsv:
    """Tests for horse CSV import and export."""

    @pytest.mark.asyncio
    async def test_import_creates_owners_once(self, db_session, test_settings, stable):
        """Owners are matched by email and created at most once."""
        service = ManagementService(db_session, test_settings)
        text = (
            "horse_name,owner_name,owner_email,breed,age,gender,status\n"
            "Seabiscuit,New Stables,new@stables.com,Thoroughbred,4,Colt,Active\n"
            "War Admiral,New Stables,new@stables.com,,5,,\n"
            "Thunder Two,John Smith Racing,john@smithracing.com,,,,\n"
            ",Nobody,nobody@example.com,,,,\n"
        )

        summary = await service.import_horses_csv(text)

        assert summary.owners_created == 1
        assert summary.horses_created == 3
        assert summary.horses_skipped == 1
        new_owner = await OwnerRepository(db_session).get_by_email("new@stables.com")
        horses = await HorseRepository(db_session).get_by_owner(new_owner.id)
        assert [h.name for h in horses] == ["Seabiscuit", "War Admiral"]
        assert horses[0].gender == "colt"
        assert horses[0].age == 4
        assert len({h.tracking_id for h in horses}) == 2

    @pytest.mark.asyncio
    async def test_import_missing_columns(self, db_session, test_settings):
        """Required columns must be present."""
        service = ManagementService(db_session, test_settings)

        with pytest.raises(ImportFormatError) as exc_info:
            await service.import_horses_csv("horse_name,owner_name\nSeabiscuit,New\n")

        assert exc_info.value.message == "Missing required columns: owner_email"

    @pytest.mark.asyncio
    async def test_import_invalid_row_writes_nothing(self, db_session, test_settings):
        """A bad row fails the import before any owner is created."""
        service = ManagementService(db_session, test_settings)
        text = (
            "horse_name,owner_name,owner_email,age\n"
            "Seabiscuit,New Stables,new@stables.com,4\n"
            "Old Timer,New Stables,new@stables.com,99\n"
        )

        with pytest.raises(ImportFormatError) as exc_info:
            await service.import_horses_csv(text)

        assert exc_info.value.message.startswith("Row 3")
        assert await OwnerRepository(db_session).count() == 0

    @pytest.mark.asyncio
    async def test_export(self, db_session, test_settings, stable):
        """Export lists every horse with owner and location names."""
        service = ManagementService(db_session, test_settings)

        text = await service.export_horses_csv()

        assert text.splitlines()[0] == ",".join(HORSE_CSV_COLUMNS)
        rows = read_csv_rows(text, HORSE_CSV_COLUMNS)
        assert len(rows) == 5
        first = rows[0]
        assert first["horse_name"] == "Thunder Bolt"
        assert first["current_location"] == "Main Track"
        assert first["owner_email"] == "john@smithracing.com"
        assert first["age"] == "4"
        assert rows[1]["current_location"] == ""
