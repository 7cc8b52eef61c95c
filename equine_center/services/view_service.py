"""Screen-level view loading: load tables, join, derive statuses, filter."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.errors import ValidationError, ViewLoadError
from equine_center.models import (
    Activity,
    ActivityType,
    DrugTestStatus,
    HorseStatus,
    Location,
    Race,
    User,
    utc_now,
)
from equine_center.repositories import RecordStore
from equine_center.services.filters import (
    FilterData,
    FilterState,
    apply_filters,
    horse_predicate,
    location_entry_predicate,
    owner_predicate,
    problem_predicate,
    race_predicate,
    status_entry_predicate,
)
from equine_center.services.joiner import (
    HorseView,
    OwnerSummary,
    RaceHistory,
    join_horses,
    join_owners,
    join_races,
    visible_horses,
)
from equine_center.services.status import (
    AlertStatus,
    CapacityMode,
    LocationStatus,
    ProblemSeverity,
    alert_counts,
    derive_alert_status,
    derive_location_status,
    detect_problems,
    location_occupancy,
)

logger = logging.getLogger(__name__)


@dataclass
class HorseStatusEntry:
    """Command center tile."""

    view: HorseView
    status: AlertStatus
    status_text: str


@dataclass
class CommandCenterBoard:
    entries: list[HorseStatusEntry]
    counts: dict[str, int]
    last_update: datetime


@dataclass
class HorseLocationEntry:
    """Location map row."""

    view: HorseView
    location_status: LocationStatus


@dataclass
class LocationMapResult:
    entries: list[HorseLocationEntry]
    counts: dict[str, int]


@dataclass
class ProblemEntry:
    """Problems view row: one problem of one horse."""

    view: HorseView
    severity: ProblemSeverity
    problem_text: str
    details: str


@dataclass
class ProblemsResult:
    entries: list[ProblemEntry]
    critical_count: int
    warning_count: int


@dataclass
class DashboardStats:
    total_horses: int
    active_horses: int
    inactive_horses: int
    injured_horses: int
    recent_activities: list[Activity] = field(default_factory=list)
    upcoming_races: list[Race] = field(default_factory=list)
    pending_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0


@dataclass
class GridRow:
    """Flat data grid row."""

    id: int
    tracking_id: str
    name: str
    registration_number: str | None
    breed: str | None
    color: str | None
    age: int | None
    gender: str
    status: str
    current_activity: str | None
    owner_id: int
    owner_name: str
    location_name: str


GRID_SORT_FIELDS = frozenset(f.name for f in fields(GridRow))


@dataclass
class CountItem:
    label: str
    count: int


@dataclass
class ReportData:
    total_horses: int
    active_horses: int
    total_activities: int
    total_races: int
    drug_tests_count: int
    vet_records_count: int
    horses_by_status: list[CountItem]
    activities_by_type: list[CountItem]
    monthly_activities: list[CountItem]


@contextmanager
def _reported(view_name: str):
    """Turn store failures into a ViewLoadError with a static message."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Error loading %s data", view_name)
        raise ViewLoadError(f"Failed to load {view_name} data") from exc


def _sort_key(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _months_back(now: datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``count`` months, oldest first."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


class ViewService:
    """Loads and assembles every dashboard view."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.store = RecordStore(session)
        self.settings = settings or get_settings()

    @property
    def capacity_mode(self) -> CapacityMode:
        return CapacityMode(self.settings.capacity_mode)

    async def _load(self, *entities: str) -> dict[str, list]:
        tables = {}
        for entity in entities:
            tables[entity] = await self.store.get_all(entity)
        return tables

    async def _horse_views(
        self,
        user: User | None,
        now: datetime,
        with_races: bool = False,
    ) -> tuple[list[HorseView], dict[str, list]]:
        entities = ["horses", "owners", "locations", "location_assignments"]
        if with_races:
            entities.append("race_participants")
        tables = await self._load(*entities)
        horses = visible_horses(tables["horses"], tables["owners"], user)
        views = join_horses(
            horses,
            tables["owners"],
            tables["locations"],
            tables["location_assignments"],
            tables.get("race_participants", ()),
            now=now,
        )
        return views, tables

    async def command_center(
        self,
        filters: FilterState,
        user: User | None = None,
        now: datetime | None = None,
    ) -> CommandCenterBoard:
        """Alert status for every visible horse, with colour counts."""
        now = now or utc_now()
        with _reported("command center"):
            views, _ = await self._horse_views(user, now, with_races=True)

        entries = []
        for view in views:
            alert = derive_alert_status(view.horse, view.assignment, view.location)
            entries.append(
                HorseStatusEntry(view=view, status=alert.status, status_text=alert.text)
            )

        filtered = apply_filters(entries, filters, status_entry_predicate)
        return CommandCenterBoard(
            entries=filtered,
            counts=alert_counts(e.status for e in filtered),
            last_update=now,
        )

    async def location_map(
        self,
        filters: FilterState,
        user: User | None = None,
        now: datetime | None = None,
    ) -> LocationMapResult:
        """Horses with location and location status."""
        now = now or utc_now()
        with _reported("location"):
            views, _ = await self._horse_views(user, now, with_races=True)

        entries = [
            HorseLocationEntry(
                view=view,
                location_status=derive_location_status(view.horse.current_activity),
            )
            for view in views
        ]
        filtered = apply_filters(entries, filters, location_entry_predicate)

        counts = {status.value: 0 for status in LocationStatus}
        for entry in filtered:
            counts[entry.location_status.value] += 1
        return LocationMapResult(entries=filtered, counts=counts)

    async def problems(
        self,
        filters: FilterState,
        severity: str = "all",
        user: User | None = None,
        now: datetime | None = None,
    ) -> ProblemsResult:
        """Triage list. Counts cover every problem before filtering."""
        if severity != "all" and severity not in {s.value for s in ProblemSeverity}:
            raise ValidationError(f"Unknown severity: {severity}")

        now = now or utc_now()
        with _reported("problems"):
            views, tables = await self._horse_views(user, now, with_races=True)

        assignments = tables["location_assignments"]
        entries = []
        for view in views:
            for problem in detect_problems(
                view.horse,
                view.assignment,
                view.location,
                assignments,
                self.capacity_mode,
                now,
            ):
                entries.append(ProblemEntry(
                    view=view,
                    severity=problem.severity,
                    problem_text=problem.text,
                    details=problem.details,
                ))

        critical = sum(1 for e in entries if e.severity is ProblemSeverity.CRITICAL)
        warning = sum(1 for e in entries if e.severity is ProblemSeverity.WARNING)

        filtered = apply_filters(entries, filters, problem_predicate)
        if severity != "all":
            filtered = [e for e in filtered if e.severity.value == severity]

        return ProblemsResult(entries=filtered, critical_count=critical, warning_count=warning)

    async def dashboard(
        self,
        filters: FilterState,
        user: User | None = None,
        now: datetime | None = None,
    ) -> DashboardStats:
        """Headline counts for the filtered horses plus recent/upcoming items."""
        now = now or utc_now()
        with _reported("dashboard"):
            views, _ = await self._horse_views(user, now, with_races=True)
            tables = await self._load("activities", "races", "drug_tests")

        filtered = apply_filters(views, filters, horse_predicate)

        def count_status(status: HorseStatus) -> int:
            return sum(1 for v in filtered if v.horse.status == status.value)

        recent = sorted(tables["activities"], key=lambda a: (a.created_at, a.id), reverse=True)
        upcoming = sorted(
            (r for r in tables["races"] if r.race_date > now),
            key=lambda r: r.race_date,
        )
        tests = tables["drug_tests"]

        return DashboardStats(
            total_horses=len(filtered),
            active_horses=count_status(HorseStatus.ACTIVE),
            inactive_horses=count_status(HorseStatus.INACTIVE),
            injured_horses=count_status(HorseStatus.INJURED),
            recent_activities=recent[:10],
            upcoming_races=upcoming[:5],
            pending_tests=sum(1 for t in tests if t.status == DrugTestStatus.PENDING.value),
            passed_tests=sum(1 for t in tests if t.status == DrugTestStatus.PASSED.value),
            failed_tests=sum(1 for t in tests if t.status == DrugTestStatus.FAILED.value),
        )

    async def data_grid(
        self,
        filters: FilterState,
        sort_field: str = "name",
        direction: str = "asc",
        user: User | None = None,
        now: datetime | None = None,
    ) -> list[GridRow]:
        """Filtered, sorted flat horse rows."""
        if sort_field not in GRID_SORT_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort_field}'")
        if direction not in ("asc", "desc"):
            raise ValidationError("direction must be 'asc' or 'desc'")

        now = now or utc_now()
        with _reported("grid"):
            views, _ = await self._horse_views(user, now, with_races=True)

        rows = [
            GridRow(
                id=v.horse.id,
                tracking_id=v.horse.tracking_id,
                name=v.horse.name,
                registration_number=v.horse.registration_number,
                breed=v.horse.breed,
                color=v.horse.color,
                age=v.horse.age,
                gender=v.horse.gender,
                status=v.horse.status,
                current_activity=v.horse.current_activity,
                owner_id=v.horse.owner_id,
                owner_name=v.owner_name,
                location_name=v.location_name,
            )
            for v in apply_filters(views, filters, horse_predicate)
        ]

        present = [r for r in rows if getattr(r, sort_field) is not None]
        missing = [r for r in rows if getattr(r, sort_field) is None]
        present.sort(
            key=lambda r: _sort_key(getattr(r, sort_field)),
            reverse=direction == "desc",
        )
        return present + missing

    async def race_history(
        self,
        filters: FilterState,
        season: int | None = None,
    ) -> list[RaceHistory]:
        """Races with participants, newest first."""
        with _reported("race history"):
            tables = await self._load("races", "race_participants", "horses", "owners")

        histories = join_races(
            tables["races"],
            tables["race_participants"],
            tables["horses"],
            tables["owners"],
        )
        filtered = apply_filters(histories, filters, race_predicate)
        if season is not None:
            filtered = [h for h in filtered if h.race.race_date.year == season]
        return filtered

    async def horses(
        self,
        filters: FilterState,
        user: User | None = None,
        now: datetime | None = None,
    ) -> list[HorseView]:
        """Joined horses passing the filters."""
        now = now or utc_now()
        with _reported("horses"):
            views, _ = await self._horse_views(user, now, with_races=True)
        return apply_filters(views, filters, horse_predicate)

    async def locations(self, now: datetime | None = None) -> list[tuple[Location, int]]:
        """Every location with its occupancy under the configured capacity mode."""
        now = now or utc_now()
        with _reported("location"):
            tables = await self._load("locations", "location_assignments")
        return [
            (
                location,
                location_occupancy(
                    location.id, tables["location_assignments"], self.capacity_mode, now
                ),
            )
            for location in tables["locations"]
        ]

    async def owners(self, filters: FilterState) -> list[OwnerSummary]:
        """Owners with their horses."""
        with _reported("owners"):
            tables = await self._load("owners", "horses")
        summaries = join_owners(tables["owners"], tables["horses"])
        return apply_filters(summaries, filters, owner_predicate)

    async def filter_data(self) -> FilterData:
        """Option lists for the shared filters."""
        with _reported("filter"):
            tables = await self._load("owners", "horses", "locations", "races")
        return FilterData(
            owners=tables["owners"],
            horses=tables["horses"],
            locations=tables["locations"],
            races=tables["races"],
        )

    async def reports(
        self,
        user: User | None = None,
        now: datetime | None = None,
    ) -> ReportData:
        """Summary statistics for the reports view."""
        now = now or utc_now()
        with _reported("report"):
            tables = await self._load(
                "horses", "owners", "activities", "races", "drug_tests", "veterinary_records"
            )

        horses = visible_horses(tables["horses"], tables["owners"], user)
        activities = tables["activities"]

        horses_by_status = [
            CountItem(
                label=status.value.capitalize(),
                count=sum(1 for h in horses if h.status == status.value),
            )
            for status in HorseStatus
        ]
        activities_by_type = [
            CountItem(
                label=kind.value.capitalize(),
                count=sum(1 for a in activities if a.activity_type == kind.value),
            )
            for kind in ActivityType
        ]
        monthly = []
        for year, month in _months_back(now, 6):
            label = datetime(year, month, 1).strftime("%b %Y")
            count = sum(
                1
                for a in activities
                if a.start_time.year == year and a.start_time.month == month
            )
            monthly.append(CountItem(label=label, count=count))

        return ReportData(
            total_horses=len(horses),
            active_horses=sum(1 for h in horses if h.status == HorseStatus.ACTIVE.value),
            total_activities=len(activities),
            total_races=len(tables["races"]),
            drug_tests_count=len(tables["drug_tests"]),
            vet_records_count=len(tables["veterinary_records"]),
            horses_by_status=horses_by_status,
            activities_by_type=activities_by_type,
            monthly_activities=monthly,
        )


def render_report_text(
    report: ReportData,
    report_type: str = "summary",
    date_range: str = "current_season",
    generated_at: datetime | None = None,
    title: str = "Equine Command Center Report",
) -> str:
    """Plain-text report document."""
    generated_at = generated_at or utc_now()
    lines = [
        title,
        f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}",
        f"Report Type: {report_type}",
        f"Date Range: {date_range}",
        "",
        "SUMMARY STATISTICS:",
        f"Total Horses: {report.total_horses}",
        f"Active Horses: {report.active_horses}",
        f"Total Activities: {report.total_activities}",
        f"Total Races: {report.total_races}",
        f"Drug Tests: {report.drug_tests_count}",
        f"Veterinary Records: {report.vet_records_count}",
        "",
        "HORSES BY STATUS:",
        *(f"{item.label}: {item.count}" for item in report.horses_by_status),
        "",
        "ACTIVITIES BY TYPE:",
        *(f"{item.label}: {item.count}" for item in report.activities_by_type),
        "",
        "MONTHLY ACTIVITIES:",
        *(f"{item.label}: {item.count}" for item in report.monthly_activities),
    ]
    return "\n".join(lines) + "\n"
