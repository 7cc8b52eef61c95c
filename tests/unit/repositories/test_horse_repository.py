"""Tests for horse, owner and location repositories."""

from datetime import timedelta

import pytest

from equine_center.repositories import (
    AssignmentRepository,
    HorseRepository,
    LocationRepository,
    OwnerRepository,
)

from tests.fixtures.factories import BASE_TIME


class TestHorseRepository:
    """Tests for HorseRepository."""

    @pytest.mark.asyncio
    async def test_get_by_tracking_id(self, db_session, stable):
        """Tracking IDs resolve to one horse."""
        repo = HorseRepository(db_session)

        horse = await repo.get_by_tracking_id("DM20240002")

        assert horse.name == "Lame Duck"
        assert await repo.get_by_tracking_id("DM20249999") is None

    @pytest.mark.asyncio
    async def test_get_by_owner(self, db_session, stable):
        """Horses are listed per owner in ID order."""
        repo = HorseRepository(db_session)

        horses = await repo.get_by_owner(stable.owners[0].id)

        assert [h.name for h in horses] == ["Thunder Bolt", "Wanderer"]

    @pytest.mark.asyncio
    async def test_count_by_owners(self, db_session, stable):
        """Counts only cover owners that have horses."""
        repo = HorseRepository(db_session)
        john, golden = stable.owners

        counts = await repo.count_by_owners([john.id, golden.id, 999])

        assert counts == {john.id: 2, golden.id: 3}
        assert await repo.count_by_owners([]) == {}


class TestOwnerRepository:
    """Tests for OwnerRepository."""

    @pytest.mark.asyncio
    async def test_email_availability(self, db_session, stable):
        """An owner's own email stays available to it."""
        repo = OwnerRepository(db_session)
        john = stable.owners[0]

        assert await repo.get_by_email("john@smithracing.com") is john
        assert await repo.is_email_available("john@smithracing.com") is False
        assert await repo.is_email_available("john@smithracing.com", exclude_id=john.id) is True
        assert await repo.is_email_available("new@example.com") is True


class TestLocationRepositories:
    """Tests for LocationRepository and AssignmentRepository."""

    @pytest.mark.asyncio
    async def test_get_by_name(self, db_session, stable):
        """Locations resolve by exact name."""
        repo = LocationRepository(db_session)

        assert (await repo.get_by_name("Medical Bay")).type == "medical"
        assert await repo.get_by_name("medical bay") is None

    @pytest.mark.asyncio
    async def test_assignments_newest_first(self, db_session, stable):
        """Assignment history lists the newest assignment first."""
        repo = AssignmentRepository(db_session)
        horse = stable.thunder_bolt
        later = await repo.create({
            "horse_id": horse.id,
            "location_id": stable.locations[0].id,
            "assigned_at": BASE_TIME + timedelta(hours=1),
        })

        history = await repo.get_by_horse(horse.id)
        at_barn = await repo.get_by_location(stable.locations[0].id)

        assert [a.id for a in history] == [later.id, stable.assignments[0].id]
        assert {a.horse.name for a in at_barn} == {"Thunder Bolt", "Stable Mate"}
