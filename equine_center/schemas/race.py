"""Race schemas."""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field

from equine_center.models import RaceStatus
from equine_center.schemas.common import BaseSchema, TimestampSchema

if TYPE_CHECKING:
    from equine_center.services.joiner import RaceHistory


class RaceBase(BaseSchema):
    """Base race schema."""

    name: str = Field(..., min_length=1, max_length=100)
    race_date: datetime
    track: str = Field(..., min_length=1, max_length=100)
    distance: str = Field(..., min_length=1, max_length=30, description="e.g. 6f, 1 1/16m")
    purse: float | None = Field(None, ge=0)
    race_type: str = Field(..., min_length=1, max_length=50)
    status: RaceStatus = RaceStatus.SCHEDULED


class RaceCreate(RaceBase):
    """Schema for creating a race."""

    pass


class RaceResponse(RaceBase, TimestampSchema):
    """Race response schema."""

    id: int
    participants_count: int | None = None


class ParticipantCreate(BaseSchema):
    """Enter a horse into a race."""

    horse_id: int
    jockey_name: str | None = Field(None, max_length=100)
    post_position: int | None = Field(None, ge=1)
    odds: str | None = Field(None, max_length=20)
    finish_position: int | None = Field(None, ge=1)


class ParticipantResponse(ParticipantCreate):
    """Race participant with horse and owner names."""

    id: int
    race_id: int
    horse_name: str | None = None
    owner_name: str | None = None


class RaceHistoryResponse(RaceResponse):
    """Race with its participants."""

    participants: list[ParticipantResponse] = Field(default_factory=list)

    @classmethod
    def from_history(cls, history: "RaceHistory") -> "RaceHistoryResponse":
        race = RaceResponse.model_validate(history.race)
        participants = [
            ParticipantResponse(
                id=p.participant.id,
                race_id=p.participant.race_id,
                horse_id=p.participant.horse_id,
                jockey_name=p.participant.jockey_name,
                post_position=p.participant.post_position,
                odds=p.participant.odds,
                finish_position=p.participant.finish_position,
                horse_name=p.horse.name if p.horse else None,
                owner_name=p.owner.name if p.owner else None,
            )
            for p in history.participants
        ]
        return cls(
            **race.model_dump(exclude={"participants_count"}),
            participants_count=history.participant_count,
            participants=participants,
        )
