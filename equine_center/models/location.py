"""Location and location assignment models."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from equine_center.database import Base
from equine_center.models.base import TimestampMixin, utc_now


class LocationType(str, enum.Enum):
    """Location type enum."""

    STABLE = "stable"
    PADDOCK = "paddock"
    TRACK = "track"
    BARN = "barn"
    MEDICAL = "medical"
    QUARANTINE = "quarantine"


class Location(Base, TimestampMixin):
    """Location table model."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Advisory only; live occupancy is computed from assignments
    current_occupancy: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name='{self.name}', type='{self.type}')>"


class LocationAssignment(Base):
    """Location assignment table model.

    An assignment is active while ``assigned_until`` is null or in the future.
    """

    __tablename__ = "location_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    horse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("horses.id"), nullable=False, index=True
    )
    location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=False, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, index=True
    )
    assigned_until: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    assigned_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    horse = relationship("Horse")
    location = relationship("Location")

    def __repr__(self) -> str:
        return (
            f"<LocationAssignment(id={self.id}, horse_id={self.horse_id}, "
            f"location_id={self.location_id})>"
        )
