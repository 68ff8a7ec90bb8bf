from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import user_out
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import AuthUserOut, LoginIn, RegisterIn, TokenOut, UserOut
from app.schemas.common import DataResponse, MessageResponse
from app.services.auth import AuthUser, authenticate, get_current_user, issue_token, register_user, revoke_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)) -> TokenOut:
    user = await authenticate(db, payload.email, payload.password)
    token, ttl = issue_token(user)
    return TokenOut(token=token, expires_in=ttl)


@router.post("/register", response_model=DataResponse[UserOut], status_code=201)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)) -> DataResponse[UserOut]:
    user = await register_user(db, payload)
    return DataResponse[UserOut](data=user_out(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: AuthUser = Depends(get_current_user)) -> MessageResponse:
    await revoke_token(current_user)
    logger.info("User id=%s logged out", current_user.id)
    return MessageResponse(message="Logout success")


@router.get("/me", response_model=AuthUserOut)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(get_current_user),
) -> AuthUserOut:
    row = await db.get(User, current_user.id)
    return AuthUserOut(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        role=current_user.role,
        service_areas=[a.service_area for a in row.support_areas] if row is not None else [],
    )
