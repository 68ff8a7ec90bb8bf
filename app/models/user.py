from __future__ import annotations

import enum

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import TimestampMixin


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    ATTENDANT = "attendant"
    SUPPORT = "support"
    USER = "user"


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("role in ('admin','attendant','support','user')", name="role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, index=True, nullable=False)

    support_areas: Mapped[list[SupportArea]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="SupportArea.id",
        lazy="selectin",
    )


class SupportArea(TimestampMixin, Base):
    __tablename__ = "support_areas"
    __table_args__ = (UniqueConstraint("user_id", "service_area", name="uq_support_areas_user_area"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    service_area: Mapped[str] = mapped_column(String(255), nullable=False)

    user: Mapped[User] = relationship(back_populates="support_areas")
