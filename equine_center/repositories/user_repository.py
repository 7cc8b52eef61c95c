"""User repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.models import User
from equine_center.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)
