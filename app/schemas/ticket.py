from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_blank


class TicketCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    client: str = Field(min_length=1, max_length=255)
    occupation_area: str = Field(min_length=1, max_length=255)

    @field_validator("name", "client", "occupation_area")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return reject_blank(value)


class TicketUpdateIn(TicketCreateIn):
    id: int


class TicketOut(BaseModel):
    id: int
    name: str
    client: str
    occupation_area: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
