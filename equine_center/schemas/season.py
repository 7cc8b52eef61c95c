"""Season import/export schemas."""

from datetime import datetime

from pydantic import ConfigDict, Field

from equine_center.models import Gender, HorseStatus, LocationType
from equine_center.schemas.common import BaseSchema


class SeasonOwner(BaseSchema):
    id: int
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str | None = None
    address: str | None = None


class SeasonLocation(BaseSchema):
    id: int
    name: str = Field(..., min_length=1)
    type: LocationType = LocationType.STABLE
    capacity: int = Field(50, ge=0)
    description: str | None = None


class SeasonHorse(BaseSchema):
    id: int
    tracking_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    registration_number: str | None = None
    breed: str | None = None
    color: str | None = None
    age: int | None = None
    gender: Gender = Gender.GELDING
    status: HorseStatus = HorseStatus.ACTIVE
    owner_id: int
    current_location_id: int | None = None
    current_activity: str | None = None


class SeasonExport(BaseSchema):
    """Whole-season JSON document."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)

    season: str
    racetrack: str
    export_date: datetime | None = Field(None, alias="exportDate")
    horses: list[SeasonHorse] = Field(default_factory=list)
    owners: list[SeasonOwner] = Field(default_factory=list)
    locations: list[SeasonLocation] = Field(default_factory=list)


class ImportSummary(BaseSchema):
    """Counts of records written by an import."""

    owners_created: int = 0
    locations_created: int = 0
    horses_created: int = 0
    horses_skipped: int = 0
