"""Location and location assignment repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from equine_center.models import Location, LocationAssignment
from equine_center.repositories.base import BaseRepository


class LocationRepository(BaseRepository[Location]):
    """Repository for Location model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Location, session)

    async def get_by_name(self, name: str) -> Location | None:
        """Get first location with the exact name."""
        result = await self.session.execute(
            select(Location).where(Location.name == name).order_by(Location.id).limit(1)
        )
        return result.scalar_one_or_none()


class AssignmentRepository(BaseRepository[LocationAssignment]):
    """Repository for LocationAssignment model."""

    def __init__(self, session: AsyncSession):
        super().__init__(LocationAssignment, session)

    async def get_by_horse(self, horse_id: int) -> list[LocationAssignment]:
        """Get all assignments of a horse, newest first."""
        result = await self.session.execute(
            select(LocationAssignment)
            .where(LocationAssignment.horse_id == horse_id)
            .order_by(LocationAssignment.assigned_at.desc(), LocationAssignment.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_location(self, location_id: int) -> list[LocationAssignment]:
        """Get all assignments to a location with horses loaded."""
        result = await self.session.execute(
            select(LocationAssignment)
            .options(selectinload(LocationAssignment.horse))
            .where(LocationAssignment.location_id == location_id)
            .order_by(LocationAssignment.assigned_at.desc(), LocationAssignment.id.desc())
        )
        return list(result.scalars().all())
