from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class MessageResponse(BaseModel):
    message: str


class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


def reject_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value
