"""Location and assignment schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from equine_center.models import LocationType, as_naive_utc
from equine_center.schemas.common import BaseSchema, TimestampSchema


class LocationBase(BaseSchema):
    """Base location schema."""

    name: str = Field(..., min_length=1, max_length=100)
    type: LocationType
    capacity: int = Field(0, ge=0)
    description: str | None = None


class LocationCreate(LocationBase):
    """Schema for creating a location."""

    pass


class LocationResponse(LocationBase, TimestampSchema):
    """Location response schema."""

    id: int
    current_occupancy: int = 0


class AssignmentCreate(BaseSchema):
    """Assign a horse to a location."""

    location_id: int
    assigned_at: datetime | None = None
    assigned_until: datetime | None = None
    notes: str | None = None

    @field_validator("assigned_at", "assigned_until")
    @classmethod
    def to_naive_utc(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v)


class AssignmentResponse(BaseSchema):
    """Location assignment response schema."""

    id: int
    horse_id: int
    location_id: int
    assigned_at: datetime
    assigned_until: datetime | None = None
    assigned_by: int | None = None
    notes: str | None = None
