"""Business logic services."""

from equine_center.services.filters import (
    FilterData,
    FilterState,
    apply_filters,
    build_filter_state,
    clear_filters,
    update_filter,
)
from equine_center.services.management_service import ManagementService
from equine_center.services.monitor import CommandCenterMonitor
from equine_center.services.season_service import SeasonContext, SeasonService
from equine_center.services.view_service import ViewService, render_report_text

__all__ = [
    "FilterData",
    "FilterState",
    "apply_filters",
    "build_filter_state",
    "clear_filters",
    "update_filter",
    "ManagementService",
    "CommandCenterMonitor",
    "SeasonContext",
    "SeasonService",
    "ViewService",
    "render_report_text",
]
