from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.common import SoftDeleteMixin, TimestampMixin


class Service(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "services"
    __table_args__ = (
        Index("ix_services_support_status", "support_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requester_name: Mapped[str] = mapped_column(String(255), nullable=False)
    ticket_id: Mapped[int] = mapped_column(ForeignKey("tickets.id"), index=True, nullable=False)
    # Free text; matched against SupportArea.service_area, not a foreign key.
    service_area: Mapped[str] = mapped_column(String(255), nullable=False)
    support_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), index=True, nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
