"""Entity joins over already-loaded tables.

Every join builds ``id -> record`` maps once and resolves foreign keys
against them. A missing target resolves to ``None``; joins never raise.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Protocol, TypeVar

from equine_center.models import (
    Horse,
    HorseStatus,
    Location,
    LocationAssignment,
    Owner,
    Race,
    RaceParticipant,
    User,
    UserRole,
    utc_now,
)

UNKNOWN_OWNER = "Unknown"
UNASSIGNED_LOCATION = "Unassigned"


class _HasId(Protocol):
    id: int


RecordT = TypeVar("RecordT", bound=_HasId)


def index_by_id(records: Iterable[RecordT]) -> dict[int, RecordT]:
    """Map each record's ID to the record."""
    return {record.id: record for record in records}


def is_assignment_active(assignment: LocationAssignment, now: datetime) -> bool:
    """An assignment is active while it has no end or ends in the future."""
    return assignment.assigned_until is None or assignment.assigned_until > now


def select_current_assignment(
    assignments: Iterable[LocationAssignment],
    now: datetime | None = None,
) -> LocationAssignment | None:
    """Pick the latest active assignment; equal ``assigned_at`` falls back to highest ID."""
    now = now or utc_now()
    active = [a for a in assignments if is_assignment_active(a, now)]
    if not active:
        return None
    return max(active, key=lambda a: (a.assigned_at, a.id))


def current_assignments_by_horse(
    assignments: Iterable[LocationAssignment],
    now: datetime | None = None,
) -> dict[int, LocationAssignment]:
    """Current assignment per horse ID."""
    now = now or utc_now()
    by_horse: dict[int, list[LocationAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_horse[assignment.horse_id].append(assignment)

    current = {}
    for horse_id, rows in by_horse.items():
        selected = select_current_assignment(rows, now)
        if selected is not None:
            current[horse_id] = selected
    return current


@dataclass
class HorseView:
    """Horse with owner, current assignment, location and race links resolved."""

    horse: Horse
    owner: Owner | None = None
    assignment: LocationAssignment | None = None
    location: Location | None = None
    race_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def owner_name(self) -> str:
        return self.owner.name if self.owner else UNKNOWN_OWNER

    @property
    def location_name(self) -> str:
        return self.location.name if self.location else UNASSIGNED_LOCATION

    @property
    def stall_number(self) -> str | None:
        if self.assignment is None or self.location is None:
            return None
        return f"{self.location.name}-{self.assignment.id:03d}"


@dataclass
class ParticipantView:
    """Race participant with its horse and the horse's owner."""

    participant: RaceParticipant
    horse: Horse | None = None
    owner: Owner | None = None


@dataclass
class RaceHistory:
    """Race with resolved participants."""

    race: Race
    participants: list[ParticipantView] = field(default_factory=list)

    @property
    def participant_count(self) -> int:
        return len(self.participants)


@dataclass
class OwnerSummary:
    """Owner with the horses that reference it."""

    owner: Owner
    horses: list[Horse] = field(default_factory=list)

    @property
    def horse_count(self) -> int:
        return len(self.horses)

    @property
    def active_horse_count(self) -> int:
        return sum(1 for h in self.horses if h.status == HorseStatus.ACTIVE.value)


def join_horses(
    horses: Iterable[Horse],
    owners: Iterable[Owner],
    locations: Iterable[Location],
    assignments: Iterable[LocationAssignment],
    participants: Iterable[RaceParticipant] = (),
    now: datetime | None = None,
) -> list[HorseView]:
    """Build one HorseView per horse, preserving input order."""
    owners_by_id = index_by_id(owners)
    locations_by_id = index_by_id(locations)
    current = current_assignments_by_horse(assignments, now)

    races_by_horse: dict[int, set[int]] = defaultdict(set)
    for participant in participants:
        races_by_horse[participant.horse_id].add(participant.race_id)

    views = []
    for horse in horses:
        assignment = current.get(horse.id)
        location = locations_by_id.get(assignment.location_id) if assignment else None
        views.append(
            HorseView(
                horse=horse,
                owner=owners_by_id.get(horse.owner_id),
                assignment=assignment,
                location=location,
                race_ids=frozenset(races_by_horse.get(horse.id, ())),
            )
        )
    return views


def join_races(
    races: Iterable[Race],
    participants: Iterable[RaceParticipant],
    horses: Iterable[Horse],
    owners: Iterable[Owner],
) -> list[RaceHistory]:
    """Attach participants (with horse and owner) to races, newest race first."""
    horses_by_id = index_by_id(horses)
    owners_by_id = index_by_id(owners)

    by_race: dict[int, list[ParticipantView]] = defaultdict(list)
    for participant in participants:
        horse = horses_by_id.get(participant.horse_id)
        owner = owners_by_id.get(horse.owner_id) if horse else None
        by_race[participant.race_id].append(
            ParticipantView(participant=participant, horse=horse, owner=owner)
        )

    histories = [
        RaceHistory(race=race, participants=by_race.get(race.id, []))
        for race in races
    ]
    histories.sort(key=lambda h: h.race.race_date, reverse=True)
    return histories


def join_owners(owners: Iterable[Owner], horses: Iterable[Horse]) -> list[OwnerSummary]:
    """Group horses under their owners."""
    by_owner: dict[int, list[Horse]] = defaultdict(list)
    for horse in horses:
        by_owner[horse.owner_id].append(horse)
    return [OwnerSummary(owner=owner, horses=by_owner.get(owner.id, [])) for owner in owners]


def visible_horses(
    horses: Iterable[Horse],
    owners: Iterable[Owner],
    user: User | None,
) -> list[Horse]:
    """Row-level visibility: owner users see only their own horses.

    Anonymous callers, admins and viewers see every horse. An owner user is
    matched to an Owner by email; without a match they see nothing.
    """
    horses = list(horses)
    if user is None or user.role != UserRole.OWNER.value:
        return horses

    owner = next((o for o in owners if o.email == user.email), None)
    if owner is None:
        return []
    return [h for h in horses if h.owner_id == owner.id]
