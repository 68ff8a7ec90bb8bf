from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.service import ServiceOut


class SupportUserOut(BaseModel):
    id: int
    name: str
    email: str
    service_areas: list[str] = Field(default_factory=list)
    services: list[ServiceOut] = Field(default_factory=list)
