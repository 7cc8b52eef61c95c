"""Owner API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_app_settings, get_filters
from equine_center.config import Settings
from equine_center.database import get_db
from equine_center.errors import NotFoundError
from equine_center.repositories import HorseRepository, OwnerRepository
from equine_center.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    OwnerCreate,
    OwnerResponse,
    OwnerSummaryResponse,
    OwnerUpdate,
)
from equine_center.services import FilterState, ManagementService, ViewService
from equine_center.services.joiner import OwnerSummary

router = APIRouter(prefix="/owners", tags=["owners"])


@router.get("", response_model=list[OwnerSummaryResponse])
async def get_owners(
    filters: FilterState = Depends(get_filters),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Get owners with their horses."""
    summaries = await ViewService(db, settings).owners(filters)
    return [OwnerSummaryResponse.from_summary(s) for s in summaries]


@router.get("/{owner_id}", response_model=OwnerSummaryResponse)
async def get_owner(
    owner_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an owner with their horses."""
    owner = await OwnerRepository(db).get(owner_id)
    if not owner:
        raise NotFoundError("Owner not found", details={"owner_id": owner_id})
    horses = await HorseRepository(db).get_by_owner(owner_id)
    return OwnerSummaryResponse.from_summary(OwnerSummary(owner=owner, horses=horses))


@router.post("", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED)
async def create_owner(
    data: OwnerCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Add an owner."""
    owner = await ManagementService(db, settings).add_owner(data)
    return OwnerResponse.model_validate(owner)


@router.patch("/{owner_id}", response_model=OwnerResponse)
async def update_owner(
    owner_id: int,
    data: OwnerUpdate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Update an owner."""
    owner = await ManagementService(db, settings).update_owner(owner_id, data)
    return OwnerResponse.model_validate(owner)


@router.post("/delete", response_model=BulkDeleteResponse)
async def delete_owners(
    data: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Delete the selected owners. Rejected while any of them still has horses."""
    deleted = await ManagementService(db, settings).delete_owners(data.ids)
    return BulkDeleteResponse(deleted=deleted)


@router.delete("/{owner_id}/horses", response_model=BulkDeleteResponse)
async def delete_owner_horses(
    owner_id: int,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Delete every horse of an owner."""
    deleted = await ManagementService(db, settings).delete_owner_horses(owner_id)
    return BulkDeleteResponse(deleted=deleted)
