"""Horse API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_app_settings, get_current_user, get_filters
from equine_center.config import Settings
from equine_center.database import get_db
from equine_center.errors import NotFoundError
from equine_center.models import User
from equine_center.repositories import AssignmentRepository, HorseRepository
from equine_center.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    HorseCreate,
    HorseListResponse,
    HorseResponse,
    HorseUpdate,
    HorseViewResponse,
)
from equine_center.services import FilterState, ManagementService, ViewService

router = APIRouter(prefix="/horses", tags=["horses"])


@router.get("", response_model=HorseListResponse)
async def get_horses(
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Get horses with owner and location, narrowed by the shared filters."""
    views = await ViewService(db, settings).horses(filters, user)
    return HorseListResponse(
        items=[HorseViewResponse.from_view(v) for v in views],
        total=len(views),
    )


@router.get("/tracking/{tracking_id}", response_model=HorseResponse)
async def get_horse_by_tracking_id(
    tracking_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a horse by tracking ID."""
    horse = await HorseRepository(db).get_by_tracking_id(tracking_id)
    if not horse:
        raise NotFoundError("Horse not found", details={"tracking_id": tracking_id})
    return HorseResponse.model_validate(horse)


@router.get("/{horse_id}", response_model=HorseResponse)
async def get_horse(
    horse_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a horse by ID."""
    horse = await HorseRepository(db).get(horse_id)
    if not horse:
        raise NotFoundError("Horse not found", details={"horse_id": horse_id})
    return HorseResponse.model_validate(horse)


@router.post("", response_model=HorseResponse, status_code=status.HTTP_201_CREATED)
async def create_horse(
    data: HorseCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Add a horse. The tracking ID is generated."""
    horse = await ManagementService(db, settings).add_horse(data)
    return HorseResponse.model_validate(horse)


@router.patch("/{horse_id}", response_model=HorseResponse)
async def update_horse(
    horse_id: int,
    data: HorseUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Update a horse."""
    horse = await ManagementService(db, settings).update_horse(horse_id, data)
    return HorseResponse.model_validate(horse)


@router.post("/delete", response_model=BulkDeleteResponse)
async def delete_horses(
    data: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Delete the selected horses."""
    deleted = await ManagementService(db, settings).delete_horses(data.ids)
    return BulkDeleteResponse(deleted=deleted)


@router.get("/{horse_id}/assignments", response_model=list[AssignmentResponse])
async def get_horse_assignments(
    horse_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a horse's location assignments, newest first."""
    assignments = await AssignmentRepository(db).get_by_horse(horse_id)
    return [AssignmentResponse.model_validate(a) for a in assignments]


@router.post(
    "/{horse_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_location(
    horse_id: int,
    data: AssignmentCreate,
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Assign a horse to a location."""
    assignment = await ManagementService(db, settings).assign_location(
        horse_id,
        data.location_id,
        assigned_by=user.id if user else None,
        assigned_at=data.assigned_at,
        assigned_until=data.assigned_until,
        notes=data.notes,
    )
    return AssignmentResponse.model_validate(assignment)
