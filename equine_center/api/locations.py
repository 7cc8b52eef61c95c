"""Location API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_app_settings
from equine_center.config import Settings
from equine_center.database import get_db
from equine_center.errors import NotFoundError
from equine_center.repositories import AssignmentRepository, LocationRepository
from equine_center.schemas import (
    AssignmentResponse,
    LocationCreate,
    LocationResponse,
    LocationWithOccupancy,
)
from equine_center.services import ViewService

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("", response_model=list[LocationWithOccupancy])
async def get_locations(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Get all locations with live occupancy."""
    rows = await ViewService(db, settings).locations()
    return [
        LocationWithOccupancy(
            **LocationResponse.model_validate(location).model_dump(),
            occupancy=occupancy,
        )
        for location, occupancy in rows
    ]


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    data: LocationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a location."""
    location = await LocationRepository(db).create(data.model_dump())
    return LocationResponse.model_validate(location)


@router.get("/{location_id}/assignments", response_model=list[AssignmentResponse])
async def get_location_assignments(
    location_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get assignments to a location, newest first."""
    if not await LocationRepository(db).get(location_id):
        raise NotFoundError("Location not found", details={"location_id": location_id})
    assignments = await AssignmentRepository(db).get_by_location(location_id)
    return [AssignmentResponse.model_validate(a) for a in assignments]
