"""Activity model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from equine_center.database import Base
from equine_center.models.base import utc_now


class ActivityType(str, enum.Enum):
    """Activity type enum."""

    TRAINING = "training"
    RACING = "racing"
    WALKING = "walking"
    RESTING = "resting"
    MEDICAL = "medical"
    TRANSPORT = "transport"


class Activity(Base):
    """Activity log table model."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    horse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("horses.id"), nullable=False, index=True
    )
    activity_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id"), nullable=True
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, horse_id={self.horse_id}, type='{self.activity_type}')>"
