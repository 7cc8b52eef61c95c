"""Horse repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.models import Horse
from equine_center.repositories.base import BaseRepository


class HorseRepository(BaseRepository[Horse]):
    """Repository for Horse model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Horse, session)

    async def get_by_tracking_id(self, tracking_id: str) -> Horse | None:
        """Get horse by tracking ID."""
        result = await self.session.execute(
            select(Horse).where(Horse.tracking_id == tracking_id)
        )
        return result.scalar_one_or_none()

    async def get_by_owner(self, owner_id: int) -> list[Horse]:
        """Get all horses of an owner."""
        result = await self.session.execute(
            select(Horse).where(Horse.owner_id == owner_id).order_by(Horse.id)
        )
        return list(result.scalars().all())

    async def count_by_owners(self, owner_ids: list[int]) -> dict[int, int]:
        """Count horses per owner for the given owners."""
        if not owner_ids:
            return {}
        result = await self.session.execute(
            select(Horse.owner_id, func.count())
            .where(Horse.owner_id.in_(owner_ids))
            .group_by(Horse.owner_id)
        )
        return {owner_id: count for owner_id, count in result.all()}
