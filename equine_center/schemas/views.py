"""Response schemas for the dashboard views."""

from datetime import datetime

from pydantic import Field

from equine_center.schemas.common import BaseSchema, CountItem
from equine_center.schemas.horse import HorseViewResponse
from equine_center.schemas.location import LocationResponse
from equine_center.schemas.race import RaceResponse


class HorseStatusResponse(HorseViewResponse):
    """Command center tile."""

    alert_status: str
    status_text: str


class CommandCenterResponse(BaseSchema):
    items: list[HorseStatusResponse]
    counts: dict[str, int]
    last_update: datetime | None = None


class HorseLocationResponse(HorseViewResponse):
    """Location map row."""

    location_status: str


class LocationMapResponse(BaseSchema):
    items: list[HorseLocationResponse]
    counts: dict[str, int]


class ProblemResponse(BaseSchema):
    """One problem of one horse."""

    horse: HorseViewResponse
    severity: str
    problem: str
    details: str


class ProblemsResponse(BaseSchema):
    items: list[ProblemResponse]
    critical_count: int
    warning_count: int


class ActivityResponse(BaseSchema):
    """Activity log entry."""

    id: int
    horse_id: int
    activity_type: str
    location_id: int | None = None
    start_time: datetime
    end_time: datetime | None = None
    notes: str | None = None
    recorded_by: int | None = None
    created_at: datetime


class DashboardResponse(BaseSchema):
    """Dashboard headline statistics."""

    total_horses: int
    active_horses: int
    inactive_horses: int
    injured_horses: int
    recent_activities: list[ActivityResponse] = Field(default_factory=list)
    upcoming_races: list[RaceResponse] = Field(default_factory=list)
    pending_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0


class GridRowResponse(BaseSchema):
    """Flat data grid row."""

    id: int
    tracking_id: str
    name: str
    registration_number: str | None = None
    breed: str | None = None
    color: str | None = None
    age: int | None = None
    gender: str
    status: str
    current_activity: str | None = None
    owner_id: int
    owner_name: str
    location_name: str


class ReportResponse(BaseSchema):
    """Reports summary."""

    total_horses: int
    active_horses: int
    total_activities: int
    total_races: int
    drug_tests_count: int
    vet_records_count: int
    horses_by_status: list[CountItem]
    activities_by_type: list[CountItem]
    monthly_activities: list[CountItem]


class FilterOption(BaseSchema):
    value: str
    label: str


class FilterOptionsResponse(BaseSchema):
    """Choices for the shared filter bar."""

    owners: list[FilterOption]
    horses: list[FilterOption]
    statuses: list[FilterOption]
    locations: list[FilterOption]
    races: list[FilterOption]


class FilterStateResponse(BaseSchema):
    owner: str
    horse: str
    status: str
    location: str
    race: str
    search_term: str


class LocationWithOccupancy(LocationResponse):
    """Location with live occupancy."""

    occupancy: int = 0
