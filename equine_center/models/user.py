"""User model."""

import enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from equine_center.database import Base
from equine_center.models.base import TimestampMixin


class UserRole(str, enum.Enum):
    """User role enum."""

    ADMIN = "admin"
    OWNER = "owner"
    VIEWER = "viewer"


class User(Base, TimestampMixin):
    """User table model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
