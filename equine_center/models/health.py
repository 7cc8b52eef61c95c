"""Veterinary record and drug test models."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from equine_center.database import Base
from equine_center.models.base import TimestampMixin


class DrugTestType(str, enum.Enum):
    """Drug test type enum."""

    PRE_RACE = "pre_race"
    POST_RACE = "post_race"
    RANDOM = "random"
    FOLLOW_UP = "follow_up"


class DrugTestStatus(str, enum.Enum):
    """Drug test status enum."""

    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    INCONCLUSIVE = "inconclusive"


class VeterinaryRecord(Base, TimestampMixin):
    """Veterinary record table model."""

    __tablename__ = "veterinary_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    horse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("horses.id"), nullable=False, index=True
    )
    examination_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    veterinarian: Mapped[str] = mapped_column(String(100), nullable=False)
    diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    treatment: Mapped[str | None] = mapped_column(Text, nullable=True)
    medications: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<VeterinaryRecord(id={self.id}, horse_id={self.horse_id})>"


class DrugTest(Base, TimestampMixin):
    """Drug test table model."""

    __tablename__ = "drug_tests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    horse_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("horses.id"), nullable=False, index=True
    )
    race_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("races.id"), nullable=True, index=True
    )
    test_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    test_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DrugTestStatus.PENDING.value, index=True
    )
    substances_tested: Mapped[str | None] = mapped_column(Text, nullable=True)
    results: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<DrugTest(id={self.id}, horse_id={self.horse_id}, status='{self.status}')>"
