"""Horse schemas."""

from typing import TYPE_CHECKING

from pydantic import Field

from equine_center.models import Gender, HorseStatus
from equine_center.schemas.common import BaseSchema, TimestampSchema

if TYPE_CHECKING:
    from equine_center.services.joiner import HorseView


class HorseBase(BaseSchema):
    """Base horse schema."""

    name: str = Field(..., min_length=1, max_length=100, description="Horse name")
    registration_number: str | None = Field(None, max_length=50)
    breed: str | None = Field(None, max_length=50)
    color: str | None = Field(None, max_length=30)
    age: int | None = Field(None, ge=0, le=40)
    gender: Gender = Gender.GELDING
    status: HorseStatus = HorseStatus.ACTIVE
    current_activity: str | None = Field(None, max_length=30, description="Free text activity")


class HorseCreate(HorseBase):
    """Schema for creating a horse. The tracking ID is generated unless given."""

    owner_id: int
    tracking_id: str | None = Field(None, min_length=1, max_length=20)


class HorseUpdate(BaseSchema):
    """Schema for updating a horse."""

    name: str | None = Field(None, min_length=1, max_length=100)
    registration_number: str | None = Field(None, max_length=50)
    breed: str | None = Field(None, max_length=50)
    color: str | None = Field(None, max_length=30)
    age: int | None = Field(None, ge=0, le=40)
    gender: Gender | None = None
    status: HorseStatus | None = None
    current_activity: str | None = Field(None, max_length=30)
    owner_id: int | None = None


class HorseResponse(HorseBase, TimestampSchema):
    """Horse response schema."""

    id: int
    tracking_id: str
    owner_id: int
    current_location_id: int | None = None


class HorseViewResponse(BaseSchema):
    """Horse joined with owner and current location."""

    id: int
    tracking_id: str
    name: str
    status: str
    current_activity: str | None = None
    breed: str | None = None
    owner_id: int
    owner_name: str
    location_id: int | None = None
    location_name: str
    stall_number: str | None = None

    @classmethod
    def fields_from_view(cls, view: "HorseView") -> dict:
        horse = view.horse
        return {
            "id": horse.id,
            "tracking_id": horse.tracking_id,
            "name": horse.name,
            "status": horse.status,
            "current_activity": horse.current_activity,
            "breed": horse.breed,
            "owner_id": horse.owner_id,
            "owner_name": view.owner_name,
            "location_id": view.location.id if view.location else None,
            "location_name": view.location_name,
            "stall_number": view.stall_number,
        }

    @classmethod
    def from_view(cls, view: "HorseView") -> "HorseViewResponse":
        return cls(**cls.fields_from_view(view))


class HorseListResponse(BaseSchema):
    """Horse list response schema."""

    items: list[HorseViewResponse]
    total: int
