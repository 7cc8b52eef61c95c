"""Owner repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.models import Owner
from equine_center.repositories.base import BaseRepository


class OwnerRepository(BaseRepository[Owner]):
    """Repository for Owner model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Owner, session)

    async def get_by_email(self, email: str) -> Owner | None:
        """Get owner by exact email."""
        result = await self.session.execute(
            select(Owner).where(Owner.email == email)
        )
        return result.scalar_one_or_none()

    async def is_email_available(self, email: str, exclude_id: int | None = None) -> bool:
        """Check that no other owner uses ``email``."""
        existing = await self.get_by_email(email)
        return existing is None or existing.id == exclude_id
