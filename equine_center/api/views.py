"""Dashboard view API routes."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_app_settings, get_current_user, get_filters
from equine_center.config import Settings
from equine_center.database import get_db
from equine_center.models import User
from equine_center.schemas import (
    ActivityResponse,
    CommandCenterResponse,
    DashboardResponse,
    FilterOption,
    FilterOptionsResponse,
    FilterStateResponse,
    GridRowResponse,
    HorseLocationResponse,
    HorseStatusResponse,
    HorseViewResponse,
    LocationMapResponse,
    ProblemResponse,
    ProblemsResponse,
    RaceHistoryResponse,
    RaceResponse,
    ReportResponse,
)
from equine_center.services import FilterState, ViewService, render_report_text
from equine_center.services.view_service import CommandCenterBoard

router = APIRouter(prefix="/views", tags=["views"])


def board_response(board: CommandCenterBoard | None) -> CommandCenterResponse:
    """Serialize a command center board; an empty board before the first load."""
    if board is None:
        return CommandCenterResponse(items=[], counts={}, last_update=None)
    return CommandCenterResponse(
        items=[
            HorseStatusResponse(
                **HorseViewResponse.fields_from_view(entry.view),
                alert_status=entry.status.value,
                status_text=entry.status_text,
            )
            for entry in board.entries
        ],
        counts=board.counts,
        last_update=board.last_update,
    )


@router.get("/command-center", response_model=CommandCenterResponse)
async def get_command_center(
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Alert status of every horse."""
    board = await ViewService(db, settings).command_center(filters, user)
    return board_response(board)


@router.get("/location-map", response_model=LocationMapResponse)
async def get_location_map(
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Horses by location. The status filter matches the location status."""
    result = await ViewService(db, settings).location_map(filters, user)
    return LocationMapResponse(
        items=[
            HorseLocationResponse(
                **HorseViewResponse.fields_from_view(entry.view),
                location_status=entry.location_status.value,
            )
            for entry in result.entries
        ],
        counts=result.counts,
    )


@router.get("/problems", response_model=ProblemsResponse)
async def get_problems(
    severity: str = Query("all"),
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Problems needing attention."""
    result = await ViewService(db, settings).problems(filters, severity, user)
    return ProblemsResponse(
        items=[
            ProblemResponse(
                horse=HorseViewResponse.from_view(entry.view),
                severity=entry.severity.value,
                problem=entry.problem_text,
                details=entry.details,
            )
            for entry in result.entries
        ],
        critical_count=result.critical_count,
        warning_count=result.warning_count,
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Headline statistics."""
    stats = await ViewService(db, settings).dashboard(filters, user)
    return DashboardResponse(
        total_horses=stats.total_horses,
        active_horses=stats.active_horses,
        inactive_horses=stats.inactive_horses,
        injured_horses=stats.injured_horses,
        recent_activities=[ActivityResponse.model_validate(a) for a in stats.recent_activities],
        upcoming_races=[RaceResponse.model_validate(r) for r in stats.upcoming_races],
        pending_tests=stats.pending_tests,
        passed_tests=stats.passed_tests,
        failed_tests=stats.failed_tests,
    )


@router.get("/data-grid", response_model=list[GridRowResponse])
async def get_data_grid(
    sort: str = Query("name"),
    direction: str = Query("asc"),
    filters: FilterState = Depends(get_filters),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Sortable flat horse rows."""
    rows = await ViewService(db, settings).data_grid(filters, sort, direction, user)
    return [GridRowResponse.model_validate(row) for row in rows]


@router.get("/race-history", response_model=list[RaceHistoryResponse])
async def get_race_history(
    season: int | None = Query(None, ge=1900, le=2100),
    filters: FilterState = Depends(get_filters),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Races with participants, newest first."""
    histories = await ViewService(db, settings).race_history(filters, season)
    return [RaceHistoryResponse.from_history(h) for h in histories]


@router.get("/reports", response_model=ReportResponse)
async def get_reports(
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Summary statistics."""
    report = await ViewService(db, settings).reports(user)
    return ReportResponse.model_validate(report)


@router.get("/reports/text", response_class=PlainTextResponse)
async def get_report_text(
    report_type: str = Query("summary", pattern=r"^[a-z_]+$"),
    date_range: str = Query("current_season", pattern=r"^[a-z_]+$"),
    user: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Plain-text report download."""
    report = await ViewService(db, settings).reports(user)
    text = render_report_text(
        report,
        report_type=report_type,
        date_range=date_range,
        title=f"{settings.app_name} Report",
    )
    filename = f"{report_type}_report.txt"
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/filters/options", response_model=FilterOptionsResponse)
async def get_filter_options(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Choices for the shared filter bar."""
    data = await ViewService(db, settings).filter_data()
    return FilterOptionsResponse(
        owners=[FilterOption(value=str(o.id), label=o.name) for o in data.owners],
        horses=[
            FilterOption(value=str(h.id), label=f"{h.name} ({h.tracking_id})")
            for h in data.horses
        ],
        statuses=[FilterOption(value=s, label=s.capitalize()) for s in data.statuses],
        locations=[FilterOption(value=str(loc.id), label=loc.name) for loc in data.locations],
        races=[FilterOption(value=str(r.id), label=r.name) for r in data.races],
    )


@router.get("/filters/state", response_model=FilterStateResponse)
async def get_filter_state(filters: FilterState = Depends(get_filters)):
    """Normalized filter state for the given query parameters."""
    return FilterStateResponse.model_validate(filters)
