"""Season import/export routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.api.deps import get_app_settings
from equine_center.config import Settings
from equine_center.database import get_db
from equine_center.errors import ImportFormatError
from equine_center.models import utc_now
from equine_center.schemas import ImportSummary
from equine_center.services import ManagementService, SeasonContext, SeasonService

router = APIRouter(prefix="/season", tags=["season"])


def get_season_context(
    season: str | None = Query(None, min_length=1, max_length=20),
    racetrack: str | None = Query(None, min_length=1, max_length=100),
    settings: Settings = Depends(get_app_settings),
) -> SeasonContext:
    """Selected season and racetrack; settings supply the defaults."""
    return SeasonContext(
        season=season or settings.default_season,
        racetrack=racetrack or settings.default_racetrack,
    )


async def read_text_body(request: Request) -> str:
    body = await request.body()
    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ImportFormatError("CSV must be UTF-8 encoded") from exc


def csv_download(text: str, filename: str) -> Response:
    return Response(
        content=text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.csv")
async def export_season_csv(
    context: SeasonContext = Depends(get_season_context),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Download the season's horses as CSV."""
    text = await SeasonService(db, settings).export_season_csv(context)
    filename = f"horses-{context.season}-{context.racetrack}-{utc_now():%Y-%m-%d}.csv"
    return csv_download(text, filename.replace(" ", "_").replace('"', ""))


@router.get("/export.json")
async def export_season_json(
    context: SeasonContext = Depends(get_season_context),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Download the season's horses, owners and locations as JSON."""
    return await SeasonService(db, settings).export_season_json(context)


@router.post("/import/csv", response_model=ImportSummary)
async def import_season_csv(
    request: Request,
    context: SeasonContext = Depends(get_season_context),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Import a season CSV sent as the request body."""
    text = await read_text_body(request)
    return await SeasonService(db, settings).import_season_csv(context, text)


@router.post("/import/json", response_model=ImportSummary)
async def import_season_json(
    payload: dict[str, Any] = Body(...),
    context: SeasonContext = Depends(get_season_context),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Import a season JSON document."""
    return await SeasonService(db, settings).import_season_json(context, payload)


@router.get("/horses/export.csv")
async def export_horses_csv(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Download every horse with its owner as CSV."""
    text = await ManagementService(db, settings).export_horses_csv()
    return csv_download(text, f"horses_owners_export_{utc_now():%Y-%m-%d}.csv")


@router.post("/horses/import.csv", response_model=ImportSummary)
async def import_horses_csv(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Bulk import horses and owners from a CSV request body."""
    text = await read_text_body(request)
    return await ManagementService(db, settings).import_horses_csv(text)
