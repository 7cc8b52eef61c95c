"""Race API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.database import get_db
from equine_center.errors import ConflictError, NotFoundError, ValidationError
from equine_center.repositories import (
    HorseRepository,
    OwnerRepository,
    ParticipantRepository,
    RaceRepository,
)
from equine_center.schemas import (
    ParticipantCreate,
    ParticipantResponse,
    RaceCreate,
    RaceHistoryResponse,
    RaceResponse,
)
from equine_center.services.joiner import join_races

router = APIRouter(prefix="/races", tags=["races"])


@router.get("", response_model=list[RaceResponse])
async def get_races(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    race_status: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """Get races with pagination."""
    repo = RaceRepository(db)
    filters = {"status": race_status} if race_status else None
    races = await repo.get_all(skip=skip, limit=limit, filters=filters)
    responses = []
    for race in races:
        race_response = RaceResponse.model_validate(race)
        race_response.participants_count = await repo.get_participants_count(race.id)
        responses.append(race_response)
    return responses


@router.get("/{race_id}", response_model=RaceHistoryResponse)
async def get_race(
    race_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a race with its participants."""
    race = await RaceRepository(db).get_with_participants(race_id)
    if not race:
        raise NotFoundError("Race not found", details={"race_id": race_id})

    horses = [p.horse for p in race.participants if p.horse is not None]
    owners = await OwnerRepository(db).get_many(sorted({h.owner_id for h in horses}))
    history = join_races([race], race.participants, horses, owners)[0]
    return RaceHistoryResponse.from_history(history)


@router.post("", response_model=RaceResponse, status_code=status.HTTP_201_CREATED)
async def create_race(
    data: RaceCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a race."""
    race = await RaceRepository(db).create(data.model_dump())
    return RaceResponse.model_validate(race)


@router.post(
    "/{race_id}/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_participant(
    race_id: int,
    data: ParticipantCreate,
    db: AsyncSession = Depends(get_db),
):
    """Enter a horse into a race."""
    if not await RaceRepository(db).get(race_id):
        raise NotFoundError("Race not found", details={"race_id": race_id})
    horse = await HorseRepository(db).get(data.horse_id)
    if not horse:
        raise ValidationError(f"Horse {data.horse_id} does not exist")

    participant_repo = ParticipantRepository(db)
    if await participant_repo.get_by_race_and_horse(race_id, data.horse_id):
        raise ConflictError("Horse is already entered in this race")

    participant = await participant_repo.create({**data.model_dump(), "race_id": race_id})
    return ParticipantResponse(
        **data.model_dump(),
        id=participant.id,
        race_id=race_id,
        horse_name=horse.name,
    )
