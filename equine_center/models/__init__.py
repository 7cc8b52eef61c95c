"""SQLAlchemy models."""

from equine_center.models.activity import Activity, ActivityType
from equine_center.models.base import TimestampMixin, as_naive_utc, utc_now
from equine_center.models.health import (
    DrugTest,
    DrugTestStatus,
    DrugTestType,
    VeterinaryRecord,
)
from equine_center.models.horse import Gender, Horse, HorseStatus
from equine_center.models.location import Location, LocationAssignment, LocationType
from equine_center.models.owner import Owner
from equine_center.models.race import Race, RaceParticipant, RaceStatus
from equine_center.models.user import User, UserRole

__all__ = [
    "User",
    "Owner",
    "Horse",
    "Location",
    "LocationAssignment",
    "Activity",
    "Race",
    "RaceParticipant",
    "VeterinaryRecord",
    "DrugTest",
    "TimestampMixin",
    "utc_now",
    "as_naive_utc",
    "UserRole",
    "HorseStatus",
    "Gender",
    "LocationType",
    "ActivityType",
    "RaceStatus",
    "DrugTestType",
    "DrugTestStatus",
]
