"""API routes."""

from equine_center.api.command_center import router as command_center_router
from equine_center.api.horses import router as horses_router
from equine_center.api.locations import router as locations_router
from equine_center.api.owners import router as owners_router
from equine_center.api.races import router as races_router
from equine_center.api.season import router as season_router
from equine_center.api.views import router as views_router

__all__ = [
    "command_center_router",
    "horses_router",
    "locations_router",
    "owners_router",
    "races_router",
    "season_router",
    "views_router",
]
