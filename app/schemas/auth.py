from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.user import UserRole
from app.schemas.common import reject_blank

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginIn(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class TokenOut(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6, max_length=255)
    role: UserRole
    service_area: str | list[str] | None = None

    @field_validator("name")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        return reject_blank(value)

    def service_area_labels(self) -> list[str]:
        raw = self.service_area
        if raw is None:
            return []
        values = [raw] if isinstance(raw, str) else list(raw)
        out: list[str] = []
        for value in values:
            label = value.strip()
            if label and label not in out:
                out.append(label)
        return out


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    service_areas: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class AuthUserOut(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    service_areas: list[str] = Field(default_factory=list)
