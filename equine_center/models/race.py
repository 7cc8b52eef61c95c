"""Race and race participant models."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from equine_center.database import Base
from equine_center.models.base import TimestampMixin, utc_now


class RaceStatus(str, enum.Enum):
    """Race status enum."""

    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Race(Base, TimestampMixin):
    """Race table model."""

    __tablename__ = "races"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    race_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    track: Mapped[str] = mapped_column(String(100), nullable=False)
    distance: Mapped[str] = mapped_column(String(30), nullable=False)
    purse: Mapped[float | None] = mapped_column(Float, nullable=True)
    race_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=RaceStatus.SCHEDULED.value, index=True
    )

    # Relationships
    participants = relationship(
        "RaceParticipant", back_populates="race", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Race(id={self.id}, name='{self.name}', race_date={self.race_date})>"


class RaceParticipant(Base):
    """Race participant table model (horse entered in a race)."""

    __tablename__ = "race_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("races.id"), nullable=False, index=True
    )
    horse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("horses.id"), nullable=False, index=True
    )
    jockey_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    post_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    odds: Mapped[str | None] = mapped_column(String(20), nullable=True)
    finish_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    # Relationships
    race = relationship("Race", back_populates="participants")
    horse = relationship("Horse")

    def __repr__(self) -> str:
        return (
            f"<RaceParticipant(id={self.id}, race_id={self.race_id}, "
            f"horse_id={self.horse_id})>"
        )
