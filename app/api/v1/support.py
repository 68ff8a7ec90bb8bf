from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import support_user_out
from app.core.errors import NotFoundError
from app.db.session import get_db
from app.schemas.common import DataResponse
from app.schemas.support import SupportUserOut
from app.services.auth import ADMIN_ONLY, FRONT_DESK, AuthUser, require_roles
from app.services.support import list_available_support, list_support_users

router = APIRouter(prefix="/support", tags=["support"])


@router.get("", response_model=DataResponse[list[SupportUserOut]])
async def get_support_users(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[list[SupportUserOut]]:
    rows = await list_support_users(db)
    if not rows:
        raise NotFoundError("Support users not found")
    return DataResponse[list[SupportUserOut]](data=[support_user_out(u, s) for u, s in rows])


@router.get("/available", response_model=DataResponse[list[SupportUserOut]])
async def get_available_support(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(FRONT_DESK)),
) -> DataResponse[list[SupportUserOut]]:
    rows = await list_available_support(db)
    if not rows:
        raise NotFoundError("No available support analyst")
    return DataResponse[list[SupportUserOut]](data=[support_user_out(u, s) for u, s in rows])
