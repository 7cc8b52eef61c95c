"""Shared API dependencies."""

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.database import get_db
from equine_center.errors import AuthError
from equine_center.models import User
from equine_center.repositories import UserRepository
from equine_center.services import CommandCenterMonitor, FilterState, build_filter_state
from equine_center.services.filters import ALL


async def get_current_user(
    x_user_id: int | None = Header(None, alias="X-User-ID"),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the optional X-User-ID header; anonymous callers see everything."""
    if x_user_id is None:
        return None
    user = await UserRepository(db).get(x_user_id)
    if user is None:
        raise AuthError("Unknown user", details={"user_id": x_user_id})
    return user


def get_filters(
    owner: str = Query(ALL),
    horse: str = Query(ALL),
    status: str = Query(ALL),
    location: str = Query(ALL),
    race: str = Query(ALL),
    search: str = Query("", max_length=200),
) -> FilterState:
    """Shared filter bar state from query parameters."""
    return build_filter_state(
        owner=owner,
        horse=horse,
        status=status,
        location=location,
        race=race,
        search_term=search,
    )


def get_app_settings() -> Settings:
    return get_settings()


def get_monitor(request: Request) -> CommandCenterMonitor:
    return request.app.state.monitor
