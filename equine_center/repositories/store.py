"""Table-oriented record store over the ten entity collections."""

from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.database import Base
from equine_center.errors import UnknownIndexError
from equine_center.models import (
    Activity,
    DrugTest,
    Horse,
    Location,
    LocationAssignment,
    Owner,
    Race,
    RaceParticipant,
    User,
    VeterinaryRecord,
)
from equine_center.repositories.base import BaseRepository

ENTITY_MODELS: dict[str, type[Base]] = {
    "users": User,
    "owners": Owner,
    "horses": Horse,
    "locations": Location,
    "activities": Activity,
    "races": Race,
    "race_participants": RaceParticipant,
    "veterinary_records": VeterinaryRecord,
    "drug_tests": DrugTest,
    "location_assignments": LocationAssignment,
}

# Secondary lookup paths per collection
INDEXES: dict[str, frozenset[str]] = {
    "users": frozenset({"username", "email", "role"}),
    "owners": frozenset({"name", "email", "user_id"}),
    "horses": frozenset({"tracking_id", "name", "owner_id", "status", "current_location_id"}),
    "locations": frozenset({"name", "type"}),
    "activities": frozenset({"horse_id", "activity_type", "start_time", "recorded_by"}),
    "races": frozenset({"name", "race_date", "status"}),
    "race_participants": frozenset({"race_id", "horse_id"}),
    "veterinary_records": frozenset({"horse_id", "examination_date"}),
    "drug_tests": frozenset({"horse_id", "race_id", "test_date", "status"}),
    "location_assignments": frozenset({"horse_id", "location_id", "assigned_at"}),
}


class RecordStore:
    """Entity-name keyed access to every collection.

    Views load whole tables through ``get_all`` and join them in memory;
    the typed repositories remain available for targeted queries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._repos: dict[str, BaseRepository] = {}

    def repository(self, entity: str) -> BaseRepository:
        """Get the generic repository for a collection."""
        if entity not in ENTITY_MODELS:
            raise UnknownIndexError(f"Unknown collection: {entity}")
        if entity not in self._repos:
            self._repos[entity] = BaseRepository(ENTITY_MODELS[entity], self.session)
        return self._repos[entity]

    def _check_index(self, entity: str, field: str) -> None:
        if field != "id" and field not in INDEXES.get(entity, frozenset()):
            raise UnknownIndexError(
                f"{entity} has no index on '{field}'",
                details={"entity": entity, "field": field},
            )

    async def get_all(self, entity: str) -> list[Any]:
        """All records of a collection in insertion order."""
        return await self.repository(entity).list_all()

    async def get(self, entity: str, id: int) -> Any | None:
        return await self.repository(entity).get(id)

    async def get_by_index(self, entity: str, field: str, value: Any) -> list[Any]:
        """Records whose indexed ``field`` equals ``value``."""
        repo = self.repository(entity)
        self._check_index(entity, field)
        return await repo.find_by(field, value)

    async def get_range(
        self,
        entity: str,
        field: str,
        lower: Any | None = None,
        upper: Any | None = None,
    ) -> list[Any]:
        """Records whose indexed ``field`` lies within the inclusive bounds."""
        repo = self.repository(entity)
        self._check_index(entity, field)
        return await repo.find_in_range(field, lower, upper)

    async def count(self, entity: str) -> int:
        return await self.repository(entity).count()

    async def add(self, entity: str, record: dict[str, Any]) -> int:
        """Insert a record and return its new ID."""
        instance = await self.repository(entity).create(record)
        return instance.id

    async def bulk_add(self, entity: str, records: Sequence[dict[str, Any]]) -> list[int]:
        """Insert several records and return their IDs."""
        instances = await self.repository(entity).bulk_create(records)
        return [instance.id for instance in instances]

    async def bulk_delete(self, entity: str, ids: Sequence[int]) -> int:
        """Delete records by ID and return the number removed."""
        return await self.repository(entity).bulk_delete(ids)
