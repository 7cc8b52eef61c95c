"""Horse and owner management."""

import logging
import random
from datetime import datetime
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.errors import (
    DuplicateEmailError,
    DuplicateTrackingIdError,
    ImportFormatError,
    NotFoundError,
    OwnerHasHorsesError,
    TrackingIdExhaustedError,
    ValidationError,
)
from equine_center.models import Horse, LocationAssignment, Owner, as_naive_utc, utc_now
from equine_center.repositories import (
    AssignmentRepository,
    HorseRepository,
    LocationRepository,
    OwnerRepository,
)
from equine_center.schemas import (
    HorseCreate,
    HorseUpdate,
    ImportSummary,
    OwnerCreate,
    OwnerUpdate,
)
from equine_center.schemas.horse import HorseBase
from equine_center.services.csv_io import optional_text, read_csv_rows, write_csv_rows
from equine_center.services.joiner import index_by_id

logger = logging.getLogger(__name__)

HORSE_CSV_REQUIRED = ("horse_name", "owner_name", "owner_email")
HORSE_CSV_COLUMNS = (
    "horse_name",
    "tracking_id",
    "registration_number",
    "breed",
    "color",
    "age",
    "gender",
    "status",
    "current_activity",
    "current_location",
    "owner_name",
    "owner_email",
    "owner_phone",
    "owner_address",
)


def parse_horse_fields(values: dict, row_label: str) -> dict:
    """Validate CSV horse cells with the horse schema; return model-ready fields."""
    data = {
        "name": values.get("name") or "",
        "registration_number": optional_text(values.get("registration_number")),
        "breed": optional_text(values.get("breed")),
        "color": optional_text(values.get("color")),
        "age": optional_text(values.get("age")),
        "current_activity": optional_text(values.get("current_activity")),
    }
    if values.get("gender"):
        data["gender"] = values["gender"].lower()
    if values.get("status"):
        data["status"] = values["status"].lower()

    try:
        return HorseBase.model_validate(data).model_dump()
    except PydanticValidationError as exc:
        raise ImportFormatError(
            f"{row_label}: invalid horse data",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


class ManagementService:
    """Create, update and delete horses, owners and location assignments."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.horse_repo = HorseRepository(session)
        self.owner_repo = OwnerRepository(session)
        self.location_repo = LocationRepository(session)
        self.assignment_repo = AssignmentRepository(session)

    async def generate_tracking_id(
        self,
        reserved: set[str] | None = None,
        now: datetime | None = None,
    ) -> str:
        """
        Generate an unused tracking ID such as ``DM20240042``.

        Args:
            reserved: IDs already handed out but not yet stored
            now: Clock used for the year part

        Raises:
            TrackingIdExhaustedError: every attempt collided
        """
        year = (now or utc_now()).year
        reserved = reserved or set()
        for _ in range(self.settings.tracking_id_max_attempts):
            number = self.rng.randint(1, 9999)
            candidate = f"{self.settings.tracking_id_prefix}{year}{number:04d}"
            if candidate in reserved:
                continue
            if await self.horse_repo.get_by_tracking_id(candidate) is None:
                return candidate

        logger.error(
            "Tracking ID generation failed after %d attempts",
            self.settings.tracking_id_max_attempts,
        )
        raise TrackingIdExhaustedError(
            "Failed to generate unique tracking ID after "
            f"{self.settings.tracking_id_max_attempts} attempts"
        )

    async def _require_owner(self, owner_id: int) -> Owner:
        owner = await self.owner_repo.get(owner_id)
        if owner is None:
            raise ValidationError(f"Owner {owner_id} does not exist")
        return owner

    async def add_horse(self, data: HorseCreate) -> Horse:
        """Add a horse; a supplied tracking ID must be unused, otherwise one is generated."""
        await self._require_owner(data.owner_id)
        tracking_id = data.tracking_id
        if tracking_id is None:
            tracking_id = await self.generate_tracking_id()
        elif await self.horse_repo.get_by_tracking_id(tracking_id) is not None:
            raise DuplicateTrackingIdError(
                f"Tracking ID {tracking_id} is already in use",
                details={"tracking_id": tracking_id},
            )
        horse = await self.horse_repo.create({**data.model_dump(), "tracking_id": tracking_id})
        logger.info("Added horse %s (%s)", horse.name, horse.tracking_id)
        return horse

    async def update_horse(self, horse_id: int, data: HorseUpdate) -> Horse:
        """Update a horse's fields; unset fields are left alone."""
        if await self.horse_repo.get(horse_id) is None:
            raise NotFoundError(f"Horse {horse_id} not found")
        if data.owner_id is not None:
            await self._require_owner(data.owner_id)

        horse = await self.horse_repo.update(horse_id, data.model_dump(exclude_unset=True))
        logger.info("Updated horse %d", horse_id)
        return horse

    async def add_owner(self, data: OwnerCreate) -> Owner:
        """Add an owner; emails are unique."""
        if not await self.owner_repo.is_email_available(data.email):
            raise DuplicateEmailError(
                "An owner with this email already exists",
                details={"email": data.email},
            )
        owner = await self.owner_repo.create(data.model_dump())
        logger.info("Added owner %s", owner.name)
        return owner

    async def update_owner(self, owner_id: int, data: OwnerUpdate) -> Owner:
        """Update an owner; the email must stay unique among other owners."""
        if await self.owner_repo.get(owner_id) is None:
            raise NotFoundError(f"Owner {owner_id} not found")
        if data.email is not None and not await self.owner_repo.is_email_available(
            data.email, exclude_id=owner_id
        ):
            raise DuplicateEmailError(
                "An owner with this email already exists",
                details={"email": data.email},
            )

        owner = await self.owner_repo.update(owner_id, data.model_dump(exclude_unset=True))
        logger.info("Updated owner %d", owner_id)
        return owner

    async def delete_owners(self, owner_ids: Iterable[int]) -> int:
        """
        Delete owners in one batch.

        The whole batch is rejected when any selected owner still has horses.
        """
        owner_ids = list(dict.fromkeys(owner_ids))
        counts = await self.horse_repo.count_by_owners(owner_ids)
        blocked = sorted(owner_id for owner_id, count in counts.items() if count > 0)
        if blocked:
            raise OwnerHasHorsesError(
                "Cannot delete owners who have horses. Please reassign or delete "
                "their horses first.",
                details={"owner_ids": blocked},
            )

        deleted = await self.owner_repo.bulk_delete(owner_ids)
        logger.info("Deleted %d owners", deleted)
        return deleted

    async def delete_horses(self, horse_ids: Iterable[int]) -> int:
        """Delete horses in one batch."""
        deleted = await self.horse_repo.bulk_delete(list(dict.fromkeys(horse_ids)))
        logger.info("Deleted %d horses", deleted)
        return deleted

    async def delete_owner_horses(self, owner_id: int) -> int:
        """Delete every horse of an owner."""
        horses = await self.horse_repo.get_by_owner(owner_id)
        return await self.delete_horses(h.id for h in horses)

    async def assign_location(
        self,
        horse_id: int,
        location_id: int,
        assigned_by: int | None = None,
        assigned_at: datetime | None = None,
        assigned_until: datetime | None = None,
        notes: str | None = None,
    ) -> LocationAssignment:
        """Record a new location assignment and refresh the horse's location cache."""
        horse = await self.horse_repo.get(horse_id)
        if horse is None:
            raise NotFoundError(f"Horse {horse_id} not found")
        if await self.location_repo.get(location_id) is None:
            raise ValidationError(f"Location {location_id} does not exist")

        assigned_at = as_naive_utc(assigned_at) or utc_now()
        assigned_until = as_naive_utc(assigned_until)
        if assigned_until is not None and assigned_until <= assigned_at:
            raise ValidationError("assigned_until must be after assigned_at")

        assignment = await self.assignment_repo.create({
            "horse_id": horse_id,
            "location_id": location_id,
            "assigned_at": assigned_at,
            "assigned_until": assigned_until,
            "assigned_by": assigned_by,
            "notes": notes,
        })
        if assigned_until is None or assigned_until > utc_now():
            await self.horse_repo.update(horse_id, {"current_location_id": location_id})

        logger.info("Assigned horse %d to location %d", horse_id, location_id)
        return assignment

    async def import_horses_csv(self, text: str) -> ImportSummary:
        """
        Bulk import horses and owners.

        Owners are matched by email and created when missing. Every row is
        validated before anything is written; rows without a horse name are
        skipped.
        """
        rows = read_csv_rows(text, HORSE_CSV_REQUIRED)

        new_owners: dict[str, dict] = {}
        planned: list[tuple[str, dict]] = []
        skipped = 0
        for number, row in enumerate(rows, start=2):
            email = row.get("owner_email", "")
            if not row.get("horse_name") or not email:
                skipped += 1
                continue
            if email not in new_owners and row.get("owner_name"):
                new_owners[email] = {
                    "name": row["owner_name"],
                    "email": email,
                    "phone": optional_text(row.get("owner_phone")),
                    "address": optional_text(row.get("owner_address")),
                }
            fields = parse_horse_fields(
                {**row, "name": row["horse_name"]}, f"Row {number}"
            )
            planned.append((email, fields))

        owner_ids: dict[str, int] = {}
        to_create = []
        for email, owner_data in new_owners.items():
            existing = await self.owner_repo.get_by_email(email)
            if existing is not None:
                owner_ids[email] = existing.id
            else:
                to_create.append(owner_data)
        for email in {e for e, _ in planned} - set(new_owners) - set(owner_ids):
            existing = await self.owner_repo.get_by_email(email)
            if existing is not None:
                owner_ids[email] = existing.id

        created_owners = await self.owner_repo.bulk_create(to_create)
        owner_ids.update({o.email: o.id for o in created_owners})

        reserved: set[str] = set()
        horse_rows = []
        for email, fields in planned:
            if email not in owner_ids:
                skipped += 1
                continue
            tracking_id = await self.generate_tracking_id(reserved)
            reserved.add(tracking_id)
            horse_rows.append({**fields, "owner_id": owner_ids[email], "tracking_id": tracking_id})
        await self.horse_repo.bulk_create(horse_rows)

        summary = ImportSummary(
            owners_created=len(created_owners),
            horses_created=len(horse_rows),
            horses_skipped=skipped,
        )
        logger.info(
            "Horse import: %d owners and %d horses created, %d rows skipped",
            summary.owners_created,
            summary.horses_created,
            summary.horses_skipped,
        )
        return summary

    async def export_horses_csv(self) -> str:
        """All horses with owner and cached location as CSV."""
        horses = await self.horse_repo.list_all()
        owners = index_by_id(await self.owner_repo.list_all())
        locations = index_by_id(await self.location_repo.list_all())

        rows = []
        for horse in horses:
            owner = owners.get(horse.owner_id)
            location = locations.get(horse.current_location_id)
            rows.append({
                "horse_name": horse.name,
                "tracking_id": horse.tracking_id,
                "registration_number": horse.registration_number,
                "breed": horse.breed,
                "color": horse.color,
                "age": horse.age,
                "gender": horse.gender,
                "status": horse.status,
                "current_activity": horse.current_activity,
                "current_location": location.name if location else "",
                "owner_name": owner.name if owner else "",
                "owner_email": owner.email if owner else "",
                "owner_phone": owner.phone if owner else "",
                "owner_address": owner.address if owner else "",
            })
        return write_csv_rows(rows, HORSE_CSV_COLUMNS)
