"""Season-scoped import and export of horses, owners and locations."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.errors import ImportFormatError, SeasonMismatchError
from equine_center.models import LocationType, utc_now
from equine_center.repositories import (
    AssignmentRepository,
    HorseRepository,
    LocationRepository,
    OwnerRepository,
)
from equine_center.schemas import (
    ImportSummary,
    SeasonExport,
    SeasonHorse,
    SeasonLocation,
    SeasonOwner,
)
from equine_center.services.csv_io import optional_text, read_csv_rows, write_csv_rows
from equine_center.services.joiner import index_by_id
from equine_center.services.management_service import ManagementService, parse_horse_fields

logger = logging.getLogger(__name__)

SEASON_CSV_REQUIRED = ("Season", "Racetrack", "HorseName", "OwnerName", "OwnerEmail")
SEASON_CSV_COLUMNS = (
    "Season",
    "Racetrack",
    "HorseID",
    "HorseName",
    "OwnerName",
    "OwnerEmail",
    "OwnerPhone",
    "Age",
    "Breed",
    "Color",
    "Gender",
    "Status",
    "TrackingID",
    "LocationName",
    "LocationType",
    "CurrentActivity",
)
IMPORTED_LOCATION_CAPACITY = 50


@dataclass(frozen=True)
class SeasonContext:
    """Season and racetrack an import or export belongs to."""

    season: str
    racetrack: str

    @classmethod
    def default(cls, settings: Settings | None = None) -> "SeasonContext":
        settings = settings or get_settings()
        return cls(settings.default_season, settings.default_racetrack)

    def check(self, season: str, racetrack: str, source: str) -> None:
        """Reject data recorded under another season or racetrack."""
        if season != self.season:
            raise SeasonMismatchError(
                f"{source} is for season {season}, but you have {self.season} selected. "
                "Please switch to the correct season first.",
                details={"expected": self.season, "found": season},
            )
        if racetrack != self.racetrack:
            raise SeasonMismatchError(
                f"{source} is for racetrack {racetrack}, but you have {self.racetrack} "
                "selected. Please switch to the correct racetrack first.",
                details={"expected": self.racetrack, "found": racetrack},
            )


@dataclass
class ImportPlan:
    """Validated records keyed by their natural keys, ready to write."""

    owners: dict[str, dict] = field(default_factory=dict)
    locations: dict[str, dict] = field(default_factory=dict)
    # (owner email, location name or None, horse fields incl. optional tracking_id)
    horses: list[tuple[str, str | None, dict]] = field(default_factory=list)
    skipped: int = 0


def _location_type(value: str | None, row_label: str) -> str:
    if not value:
        return LocationType.STABLE.value
    try:
        return LocationType(value.lower()).value
    except ValueError as exc:
        raise ImportFormatError(f"{row_label}: unknown location type '{value}'") from exc


class SeasonService:
    """Exports the current data set and imports it back without duplicates."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        management: ManagementService | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.management = management or ManagementService(session, self.settings)
        self.horse_repo = HorseRepository(session)
        self.owner_repo = OwnerRepository(session)
        self.location_repo = LocationRepository(session)
        self.assignment_repo = AssignmentRepository(session)

    async def export_season_csv(self, context: SeasonContext) -> str:
        """One row per horse with owner and cached location."""
        horses = await self.horse_repo.list_all()
        owners = index_by_id(await self.owner_repo.list_all())
        locations = index_by_id(await self.location_repo.list_all())

        rows = []
        for horse in horses:
            owner = owners.get(horse.owner_id)
            location = locations.get(horse.current_location_id)
            rows.append({
                "Season": context.season,
                "Racetrack": context.racetrack,
                "HorseID": horse.id,
                "HorseName": horse.name,
                "OwnerName": owner.name if owner else "",
                "OwnerEmail": owner.email if owner else "",
                "OwnerPhone": owner.phone if owner else "",
                "Age": horse.age,
                "Breed": horse.breed,
                "Color": horse.color,
                "Gender": horse.gender,
                "Status": horse.status,
                "TrackingID": horse.tracking_id,
                "LocationName": location.name if location else "",
                "LocationType": location.type if location else "",
                "CurrentActivity": horse.current_activity,
            })
        logger.info("Exported %d horses for %s %s", len(rows), context.season, context.racetrack)
        return write_csv_rows(rows, SEASON_CSV_COLUMNS)

    async def export_season_json(
        self,
        context: SeasonContext,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Full season document with horses, owners and locations."""
        document = SeasonExport(
            season=context.season,
            racetrack=context.racetrack,
            export_date=now or utc_now(),
            horses=[SeasonHorse.model_validate(h) for h in await self.horse_repo.list_all()],
            owners=[SeasonOwner.model_validate(o) for o in await self.owner_repo.list_all()],
            locations=[
                SeasonLocation.model_validate(loc) for loc in await self.location_repo.list_all()
            ],
        )
        return document.model_dump(mode="json", by_alias=True)

    def _plan_csv(self, context: SeasonContext, text: str) -> ImportPlan:
        rows = read_csv_rows(text, SEASON_CSV_REQUIRED)
        plan = ImportPlan()

        for number, row in enumerate(rows, start=2):
            label = f"Row {number}"
            context.check(row["Season"], row["Racetrack"], "CSV")

            email = row["OwnerEmail"]
            if not row["HorseName"]:
                plan.skipped += 1
                continue
            if not email or not row["OwnerName"]:
                raise ImportFormatError(f"{label}: owner name and email are required")

            plan.owners.setdefault(email, {
                "name": row["OwnerName"],
                "email": email,
                "phone": optional_text(row.get("OwnerPhone")),
                "address": optional_text(row.get("OwnerAddress")),
            })

            location_name = optional_text(row.get("LocationName"))
            if location_name:
                plan.locations.setdefault(location_name, {
                    "name": location_name,
                    "type": _location_type(row.get("LocationType"), label),
                    "capacity": IMPORTED_LOCATION_CAPACITY,
                })

            fields = parse_horse_fields(
                {
                    "name": row["HorseName"],
                    "age": row.get("Age"),
                    "breed": row.get("Breed"),
                    "color": row.get("Color"),
                    "gender": row.get("Gender"),
                    "status": row.get("Status"),
                    "current_activity": row.get("CurrentActivity"),
                },
                label,
            )
            fields["tracking_id"] = optional_text(row.get("TrackingID"))
            plan.horses.append((email, location_name, fields))
        return plan

    def _plan_json(self, context: SeasonContext, payload: Any) -> ImportPlan:
        try:
            document = SeasonExport.model_validate(payload)
        except PydanticValidationError as exc:
            raise ImportFormatError(
                "Invalid season JSON",
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc

        context.check(document.season, document.racetrack, "JSON")

        plan = ImportPlan()
        owner_emails = {}
        for owner in document.owners:
            owner_emails[owner.id] = owner.email
            plan.owners.setdefault(owner.email, owner.model_dump(exclude={"id"}))

        location_names = {}
        for location in document.locations:
            location_names[location.id] = location.name
            plan.locations.setdefault(location.name, location.model_dump(exclude={"id"}))

        for horse in document.horses:
            label = f"Horse {horse.tracking_id}"
            if horse.owner_id not in owner_emails:
                raise ImportFormatError(f"{label}: owner {horse.owner_id} is not in the file")
            location_name = None
            if horse.current_location_id is not None:
                if horse.current_location_id not in location_names:
                    raise ImportFormatError(
                        f"{label}: location {horse.current_location_id} is not in the file"
                    )
                location_name = location_names[horse.current_location_id]
            fields = horse.model_dump(exclude={"id", "owner_id", "current_location_id"})
            plan.horses.append((owner_emails[horse.owner_id], location_name, fields))
        return plan

    async def _apply(self, plan: ImportPlan) -> ImportSummary:
        summary = ImportSummary(horses_skipped=plan.skipped)

        owner_ids: dict[str, int] = {}
        new_owners = []
        for email, data in plan.owners.items():
            existing = await self.owner_repo.get_by_email(email)
            if existing is not None:
                owner_ids[email] = existing.id
            else:
                new_owners.append(data)
        for owner in await self.owner_repo.bulk_create(new_owners):
            owner_ids[owner.email] = owner.id
        summary.owners_created = len(new_owners)

        location_ids: dict[str, int] = {}
        new_locations = []
        for name, data in plan.locations.items():
            existing = await self.location_repo.get_by_name(name)
            if existing is not None:
                location_ids[name] = existing.id
            else:
                new_locations.append(data)
        for location in await self.location_repo.bulk_create(new_locations):
            location_ids[location.name] = location.id
        summary.locations_created = len(new_locations)

        reserved: set[str] = set()
        horse_rows = []
        horse_locations = []
        for email, location_name, fields in plan.horses:
            tracking_id = fields.get("tracking_id")
            if tracking_id:
                if tracking_id in reserved or await self.horse_repo.get_by_tracking_id(
                    tracking_id
                ):
                    summary.horses_skipped += 1
                    continue
            else:
                tracking_id = await self.management.generate_tracking_id(reserved)
            reserved.add(tracking_id)

            location_id = location_ids.get(location_name) if location_name else None
            horse_rows.append({
                **fields,
                "tracking_id": tracking_id,
                "owner_id": owner_ids[email],
                "current_location_id": location_id,
            })
            horse_locations.append(location_id)

        horses = await self.horse_repo.bulk_create(horse_rows)
        now = utc_now()
        await self.assignment_repo.bulk_create([
            {"horse_id": horse.id, "location_id": location_id, "assigned_at": now}
            for horse, location_id in zip(horses, horse_locations)
            if location_id is not None
        ])
        summary.horses_created = len(horses)
        return summary

    async def import_season_csv(self, context: SeasonContext, text: str) -> ImportSummary:
        """Import a season CSV. Nothing is written when any row is rejected."""
        summary = await self._apply(self._plan_csv(context, text))
        self._log_import(context, "CSV", summary)
        return summary

    async def import_season_json(self, context: SeasonContext, payload: Any) -> ImportSummary:
        """Import a season JSON document. Nothing is written when it is rejected."""
        summary = await self._apply(self._plan_json(context, payload))
        self._log_import(context, "JSON", summary)
        return summary

    @staticmethod
    def _log_import(context: SeasonContext, source: str, summary: ImportSummary) -> None:
        logger.info(
            "Season %s import for %s %s: %d owners, %d locations, %d horses created, "
            "%d skipped",
            source,
            context.season,
            context.racetrack,
            summary.owners_created,
            summary.locations_created,
            summary.horses_created,
            summary.horses_skipped,
        )
