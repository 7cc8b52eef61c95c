"""Owner schemas."""

from typing import TYPE_CHECKING

from pydantic import Field, field_validator

from equine_center.schemas.common import BaseSchema, TimestampSchema
from equine_center.schemas.horse import HorseResponse

if TYPE_CHECKING:
    from equine_center.services.joiner import OwnerSummary


def _check_email(value: str | None) -> str | None:
    if value is None:
        return value
    value = value.strip()
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValueError("invalid email address")
    return value


class OwnerBase(BaseSchema):
    """Base owner schema."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=30)
    address: str | None = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        return _check_email(value)


class OwnerCreate(OwnerBase):
    """Schema for creating an owner."""

    pass


class OwnerUpdate(BaseSchema):
    """Schema for updating an owner."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=30)
    address: str | None = None

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str | None) -> str | None:
        return _check_email(value)


class OwnerResponse(OwnerBase, TimestampSchema):
    """Owner response schema."""

    id: int
    user_id: int | None = None


class OwnerSummaryResponse(OwnerResponse):
    """Owner with horse counts and horses."""

    horse_count: int = 0
    active_horse_count: int = 0
    horses: list[HorseResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: "OwnerSummary") -> "OwnerSummaryResponse":
        owner = OwnerResponse.model_validate(summary.owner)
        return cls(
            **owner.model_dump(),
            horse_count=summary.horse_count,
            active_horse_count=summary.active_horse_count,
            horses=[HorseResponse.model_validate(h) for h in summary.horses],
        )
