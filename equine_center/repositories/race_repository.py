"""Race and race participant repositories."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from equine_center.models import Race, RaceParticipant
from equine_center.repositories.base import BaseRepository


class RaceRepository(BaseRepository[Race]):
    """Repository for Race model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Race, session)

    async def get_with_participants(self, race_id: int) -> Race | None:
        """Get race with participants and their horses loaded."""
        result = await self.session.execute(
            select(Race)
            .options(selectinload(Race.participants).selectinload(RaceParticipant.horse))
            .where(Race.id == race_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_participants_count(self, race_id: int) -> int:
        """Get the number of participants in a race."""
        result = await self.session.execute(
            select(func.count())
            .select_from(RaceParticipant)
            .where(RaceParticipant.race_id == race_id)
        )
        return result.scalar_one()


class ParticipantRepository(BaseRepository[RaceParticipant]):
    """Repository for RaceParticipant model."""

    def __init__(self, session: AsyncSession):
        super().__init__(RaceParticipant, session)

    async def get_by_race_and_horse(
        self, race_id: int, horse_id: int
    ) -> RaceParticipant | None:
        """Get participant row by race and horse."""
        result = await self.session.execute(
            select(RaceParticipant).where(
                RaceParticipant.race_id == race_id,
                RaceParticipant.horse_id == horse_id,
            )
        )
        return result.scalar_one_or_none()
