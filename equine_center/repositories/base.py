"""Base repository with common CRUD operations."""

import logging
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.database import Base
from equine_center.errors import StoreOperationError

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """Base repository class with CRUD operations."""

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: int) -> ModelType | None:
        """Get a record by ID."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: dict[str, Any] | None = None,
    ) -> list[ModelType]:
        """Get all records with optional pagination and filters."""
        query = select(self.model)

        if filters:
            for key, value in filters.items():
                if hasattr(self.model, key) and value is not None:
                    query = query.where(getattr(self.model, key) == value)

        query = query.order_by(self.model.id).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_all(self) -> list[ModelType]:
        """Get every record in insertion order."""
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def get_many(self, ids: Sequence[int]) -> list[ModelType]:
        """Get records whose ID is in ``ids``."""
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(ids)).order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def find_by(self, field: str, value: Any) -> list[ModelType]:
        """Get records where ``field`` equals ``value``."""
        result = await self.session.execute(
            select(self.model)
            .where(getattr(self.model, field) == value)
            .order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def find_in_range(
        self,
        field: str,
        lower: Any | None = None,
        upper: Any | None = None,
    ) -> list[ModelType]:
        """Get records where ``lower <= field <= upper`` (bounds optional)."""
        column = getattr(self.model, field)
        query = select(self.model)
        if lower is not None:
            query = query.where(column >= lower)
        if upper is not None:
            query = query.where(column <= upper)
        result = await self.session.execute(query.order_by(column, self.model.id))
        return list(result.scalars().all())

    async def count(self, filters: dict[str, Any] | None = None) -> int:
        """Count records with optional filters."""
        query = select(func.count()).select_from(self.model)

        if filters:
            for key, value in filters.items():
                if hasattr(self.model, key) and value is not None:
                    query = query.where(getattr(self.model, key) == value)

        result = await self.session.execute(query)
        return result.scalar_one()

    async def create(self, data: dict[str, Any]) -> ModelType:
        """Create a new record."""
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def bulk_create(self, rows: Sequence[dict[str, Any]]) -> list[ModelType]:
        """Create several records; either all are written or none."""
        instances = [self.model(**data) for data in rows]
        try:
            async with self.session.begin_nested():
                self.session.add_all(instances)
                await self.session.flush()
        except SQLAlchemyError as exc:
            logger.exception("Bulk add to %s failed", self.model.__tablename__)
            raise StoreOperationError(
                f"Failed to add {len(rows)} {self.model.__tablename__} records"
            ) from exc
        return instances

    async def update(self, id: int, data: dict[str, Any]) -> ModelType | None:
        """Update a record by ID."""
        instance = await self.get(id)
        if instance is None:
            return None

        for key, value in data.items():
            if hasattr(instance, key) and value is not None:
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: int) -> bool:
        """Delete a record by ID."""
        instance = await self.get(id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

    async def bulk_delete(self, ids: Sequence[int]) -> int:
        """Delete records by ID list; either all are removed or none."""
        if not ids:
            return 0
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    delete(self.model)
                    .where(self.model.id.in_(list(ids)))
                    .execution_options(synchronize_session="fetch")
                )
        except SQLAlchemyError as exc:
            logger.exception("Bulk delete from %s failed", self.model.__tablename__)
            raise StoreOperationError(
                f"Failed to delete {len(ids)} {self.model.__tablename__} records"
            ) from exc
        return result.rowcount or 0
