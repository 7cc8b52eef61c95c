"""Horse model."""

import enum

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from equine_center.database import Base
from equine_center.models.base import TimestampMixin


class HorseStatus(str, enum.Enum):
    """Horse status enum."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    INJURED = "injured"
    RETIRED = "retired"


class Gender(str, enum.Enum):
    """Horse gender enum."""

    STALLION = "stallion"
    MARE = "mare"
    GELDING = "gelding"
    FILLY = "filly"
    COLT = "colt"


class Horse(Base, TimestampMixin):
    """Horse table model."""

    __tablename__ = "horses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tracking_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    registration_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    breed: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color: Mapped[str | None] = mapped_column(String(30), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str] = mapped_column(String(10), nullable=False, default=Gender.GELDING.value)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("owners.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=HorseStatus.ACTIVE.value, index=True
    )
    current_location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=True, index=True
    )
    # Free text; see services.status.parse_activity for the recognised values
    current_activity: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Relationships
    owner = relationship("Owner")

    def __repr__(self) -> str:
        return f"<Horse(id={self.id}, tracking_id='{self.tracking_id}', name='{self.name}')>"
