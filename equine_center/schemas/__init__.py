"""Pydantic schemas."""

from equine_center.schemas.common import (
    BaseSchema,
    BulkDeleteRequest,
    BulkDeleteResponse,
    CountItem,
    TimestampSchema,
)
from equine_center.schemas.horse import (
    HorseCreate,
    HorseListResponse,
    HorseResponse,
    HorseUpdate,
    HorseViewResponse,
)
from equine_center.schemas.location import (
    AssignmentCreate,
    AssignmentResponse,
    LocationCreate,
    LocationResponse,
)
from equine_center.schemas.owner import (
    OwnerCreate,
    OwnerResponse,
    OwnerSummaryResponse,
    OwnerUpdate,
)
from equine_center.schemas.race import (
    ParticipantCreate,
    ParticipantResponse,
    RaceCreate,
    RaceHistoryResponse,
    RaceResponse,
)
from equine_center.schemas.season import (
    ImportSummary,
    SeasonExport,
    SeasonHorse,
    SeasonLocation,
    SeasonOwner,
)
from equine_center.schemas.views import (
    ActivityResponse,
    CommandCenterResponse,
    DashboardResponse,
    FilterOption,
    FilterOptionsResponse,
    FilterStateResponse,
    GridRowResponse,
    HorseLocationResponse,
    HorseStatusResponse,
    LocationMapResponse,
    LocationWithOccupancy,
    ProblemResponse,
    ProblemsResponse,
    ReportResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "TimestampSchema",
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "CountItem",
    # Horse
    "HorseCreate",
    "HorseUpdate",
    "HorseResponse",
    "HorseViewResponse",
    "HorseListResponse",
    # Owner
    "OwnerCreate",
    "OwnerUpdate",
    "OwnerResponse",
    "OwnerSummaryResponse",
    # Location
    "LocationCreate",
    "LocationResponse",
    "AssignmentCreate",
    "AssignmentResponse",
    # Race
    "RaceCreate",
    "RaceResponse",
    "RaceHistoryResponse",
    "ParticipantCreate",
    "ParticipantResponse",
    # Season
    "SeasonExport",
    "SeasonHorse",
    "SeasonOwner",
    "SeasonLocation",
    "ImportSummary",
    # Views
    "HorseStatusResponse",
    "CommandCenterResponse",
    "HorseLocationResponse",
    "LocationMapResponse",
    "ProblemResponse",
    "ProblemsResponse",
    "ActivityResponse",
    "DashboardResponse",
    "GridRowResponse",
    "ReportResponse",
    "FilterOption",
    "FilterOptionsResponse",
    "FilterStateResponse",
    "LocationWithOccupancy",
]
