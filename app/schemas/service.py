from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_blank


class ServiceCreateIn(BaseModel):
    requester_name: str = Field(min_length=1, max_length=255)
    ticket_id: int
    service_area: str = Field(min_length=1, max_length=255)
    support_id: int | None = None

    @field_validator("requester_name", "service_area")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return reject_blank(value)


class ServiceUpdateIn(ServiceCreateIn):
    service_id: int


class ServiceCompleteIn(BaseModel):
    status: bool
    notes: str = Field(min_length=1, max_length=6000)


class ServiceOut(BaseModel):
    id: int
    requester_name: str
    ticket_id: int
    service_area: str
    support_id: int | None = None
    status: bool
    notes: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
