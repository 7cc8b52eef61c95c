"""Live command center routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_current_user, get_filters, get_monitor
from equine_center.api.views import board_response
from equine_center.database import get_db
from equine_center.models import User, UserRole
from equine_center.repositories import OwnerRepository
from equine_center.schemas import CommandCenterResponse
from equine_center.services import CommandCenterMonitor, FilterState

router = APIRouter(prefix="/command-center", tags=["command-center"])


@router.get("/live", response_model=CommandCenterResponse)
async def get_live_board(
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    monitor: CommandCenterMonitor = Depends(get_monitor),
    db: AsyncSession = Depends(get_db),
):
    """Latest periodically refreshed board, filtered per request."""
    owner_id = None
    owner_only = user is not None and user.role == UserRole.OWNER.value
    if owner_only:
        owner = await OwnerRepository(db).get_by_email(user.email)
        owner_id = owner.id if owner else None
    return board_response(monitor.snapshot(filters, owner_id, visible_to_owner=owner_only))


@router.post("/refresh", response_model=CommandCenterResponse)
async def refresh_board(
    monitor: CommandCenterMonitor = Depends(get_monitor),
):
    """Refresh the live board now. Skipped while a refresh is running."""
    await monitor.refresh()
    return board_response(monitor.board)
