"""Derived horse statuses: location status, alert status and problems."""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from equine_center.models import HorseStatus, Location, LocationAssignment, utc_now
from equine_center.services.joiner import is_assignment_active


class ActivityKind(str, enum.Enum):
    """Recognised values of a horse's free-text current activity."""

    TRAINING = "training"
    RACING = "racing"
    WALKING = "walking"
    RESTING = "resting"
    MEDICAL = "medical"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


def parse_activity(value: str | None) -> ActivityKind:
    """Exact match against the known activities; anything else is UNKNOWN."""
    if not value:
        return ActivityKind.UNKNOWN
    try:
        kind = ActivityKind(value)
    except ValueError:
        return ActivityKind.UNKNOWN
    return kind


class LocationStatus(str, enum.Enum):
    """Where a horse is operationally, derived from its activity."""

    STALLED = "stalled"
    WALKING = "walking"
    RACING = "racing"
    TRAINING = "training"
    MEDICAL = "medical"
    TRANSPORT = "transport"


_LOCATION_STATUS_BY_ACTIVITY = {
    ActivityKind.RACING: LocationStatus.RACING,
    ActivityKind.TRAINING: LocationStatus.TRAINING,
    ActivityKind.WALKING: LocationStatus.WALKING,
    ActivityKind.MEDICAL: LocationStatus.MEDICAL,
    ActivityKind.TRANSPORT: LocationStatus.TRANSPORT,
}


def derive_location_status(current_activity: str | None) -> LocationStatus:
    """Resting, unknown and empty activities all map to STALLED."""
    return _LOCATION_STATUS_BY_ACTIVITY.get(
        parse_activity(current_activity), LocationStatus.STALLED
    )


class AlertStatus(str, enum.Enum):
    """Command center alert colour."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    GREY = "grey"


@dataclass(frozen=True)
class AlertResult:
    """Alert colour with its display text."""

    status: AlertStatus
    text: str


def derive_alert_status(
    horse,
    assignment: LocationAssignment | None,
    location: Location | None,
) -> AlertResult:
    """
    Evaluate a horse's alert status. The first matching rule wins.

    Args:
        horse: Any object with ``status`` and ``current_activity``
        assignment: The horse's current location assignment, if any
        location: Location resolved from that assignment, if any

    Returns:
        AlertResult with colour and display text
    """
    status = horse.status
    activity = parse_activity(horse.current_activity)

    if status in (HorseStatus.INACTIVE.value, HorseStatus.RETIRED.value):
        return AlertResult(AlertStatus.GREY, status.capitalize())
    if status == HorseStatus.INJURED.value:
        return AlertResult(AlertStatus.RED, "Injured - Medical Attention Required")
    if activity is ActivityKind.WALKING and assignment is None:
        return AlertResult(AlertStatus.YELLOW, "Walking - No Location Assigned")
    if assignment is not None and location is not None:
        return AlertResult(
            AlertStatus.GREEN,
            f"In {location.name} - {horse.current_activity or 'Assigned'}",
        )
    if assignment is None:
        return AlertResult(AlertStatus.RED, "No Location Assignment")
    return AlertResult(AlertStatus.YELLOW, "Location Assignment Issue")


def alert_counts(statuses: Iterable[AlertStatus]) -> dict[str, int]:
    """Count alerts per colour; every colour is present."""
    counts = {status.value: 0 for status in AlertStatus}
    for status in statuses:
        counts[AlertStatus(status).value] += 1
    return counts


class ProblemSeverity(str, enum.Enum):
    """Triage severity."""

    CRITICAL = "critical"
    WARNING = "warning"


class CapacityMode(str, enum.Enum):
    """Which assignment rows count towards a location's occupancy."""

    ALL_ASSIGNMENTS = "all_assignments"
    ACTIVE_ASSIGNMENTS = "active_assignments"


@dataclass(frozen=True)
class Problem:
    """One triage entry for a horse."""

    severity: ProblemSeverity
    text: str
    details: str


def location_occupancy(
    location_id: int,
    assignments: Iterable[LocationAssignment],
    mode: CapacityMode = CapacityMode.ALL_ASSIGNMENTS,
    now: datetime | None = None,
) -> int:
    """Number of assignment rows counted against a location."""
    now = now or utc_now()
    return sum(
        1
        for a in assignments
        if a.location_id == location_id
        and (mode is CapacityMode.ALL_ASSIGNMENTS or is_assignment_active(a, now))
    )


def detect_problems(
    horse,
    assignment: LocationAssignment | None,
    location: Location | None,
    assignments: Iterable[LocationAssignment],
    capacity_mode: CapacityMode = CapacityMode.ALL_ASSIGNMENTS,
    now: datetime | None = None,
) -> list[Problem]:
    """Collect every problem that applies to a horse; rules are not exclusive."""
    problems = []
    activity = parse_activity(horse.current_activity)

    if horse.status == HorseStatus.INJURED.value:
        problems.append(Problem(
            ProblemSeverity.CRITICAL,
            "Horse Injured",
            "Horse requires immediate medical attention and should not be moved "
            "without veterinary approval.",
        ))
    elif assignment is None and horse.status == HorseStatus.ACTIVE.value:
        problems.append(Problem(
            ProblemSeverity.CRITICAL,
            "No Location Assignment",
            "Active horse has no location assignment. This horse needs to be "
            "assigned to a proper location immediately.",
        ))

    if activity is ActivityKind.WALKING and assignment is None:
        problems.append(Problem(
            ProblemSeverity.WARNING,
            "Walking Without Location",
            "Horse is walking but has no specific location assigned. Consider "
            "assigning to a paddock or track.",
        ))

    if assignment is not None and location is not None:
        occupancy = location_occupancy(location.id, assignments, capacity_mode, now)
        if occupancy > location.capacity:
            problems.append(Problem(
                ProblemSeverity.WARNING,
                "Location Over Capacity",
                f"{location.name} is over capacity ({occupancy}/{location.capacity}). "
                "Consider redistributing horses.",
            ))

    return problems
