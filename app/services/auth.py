from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import CredentialsError, ForbiddenError, RegistrationError, UnauthorizedError
from app.core.security import hash_password, verify_password
from app.db.redis import redis_client
from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.auth import RegisterIn
from app.services.support import register_areas

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

ADMIN_ONLY: frozenset[UserRole] = frozenset({UserRole.ADMIN})
FRONT_DESK: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.ATTENDANT})
SUPPORT_DESK: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.SUPPORT})


@dataclass(slots=True)
class AuthUser:
    id: int
    email: str
    name: str
    role: UserRole
    token_id: str = ""
    token_expires_at: int = 0


def _revoked_key(token_id: str) -> str:
    return f"jwt:revoked:{token_id}"


def issue_token(user: User, *, now: int | None = None) -> tuple[str, int]:
    issued_at = int(now if now is not None else time.time())
    ttl = max(int(settings.jwt_ttl_seconds), 1)
    claims: dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": UserRole(user.role).value,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    if settings.jwt_issuer:
        claims["iss"] = settings.jwt_issuer
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm), ttl


def _decode_token(token: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "algorithms": [settings.jwt_algorithm],
        "leeway": settings.jwt_exp_leeway_seconds,
    }

    if settings.jwt_audience:
        kwargs["audience"] = settings.jwt_audience
    else:
        kwargs["options"] = {"verify_aud": False}

    if settings.jwt_issuer:
        kwargs["issuer"] = settings.jwt_issuer

    try:
        payload = jwt.decode(token, settings.jwt_secret, **kwargs)
    except jwt.PyJWTError as exc:
        raise UnauthorizedError("Invalid token") from exc

    return payload


def _parse_payload(payload: dict[str, Any]) -> AuthUser:
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as exc:
        raise UnauthorizedError("Invalid sub claim") from exc

    try:
        role = UserRole(str(payload.get("role") or "").strip().lower())
    except ValueError as exc:
        raise UnauthorizedError("Invalid role claim") from exc

    email = str(payload.get("email") or "").strip().lower()
    return AuthUser(
        id=user_id,
        email=email,
        name=str(payload.get("name") or email or user_id),
        role=role,
        token_id=str(payload.get("jti") or ""),
        token_expires_at=int(payload.get("exp") or 0),
    )


async def is_token_revoked(token_id: str) -> bool:
    if not token_id:
        return False
    try:
        return bool(await redis_client.exists(_revoked_key(token_id)))
    except Exception:
        # Fail-open when Redis is unavailable.
        logger.exception("Token revocation lookup failed for jti=%s", token_id)
        return False


async def revoke_token(user: AuthUser) -> None:
    if not user.token_id:
        return
    ttl = max(user.token_expires_at - int(time.time()), 1)
    try:
        await redis_client.set(_revoked_key(user.token_id), "1", ex=ttl)
    except Exception:
        logger.exception("Token revocation failed for jti=%s", user.token_id)


def ensure_role(user: AuthUser, allowed: frozenset[UserRole] | set[UserRole]) -> None:
    if user.role not in allowed:
        names = ", ".join(sorted(role.value for role in allowed))
        raise ForbiddenError(f"Unauthenticated, Not authorized for the requested roles: {names}")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> AuthUser:
    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    claims = _parse_payload(_decode_token(credentials.credentials))
    if await is_token_revoked(claims.token_id):
        raise UnauthorizedError("Token has been revoked")

    # The database row, not the token, is authoritative for the role.
    row = await db.get(User, claims.id)
    if row is None:
        raise UnauthorizedError("User no longer exists")

    claims.email = row.email
    claims.name = row.name
    claims.role = UserRole(row.role)
    return claims


def require_roles(allowed: frozenset[UserRole]) -> Callable[..., Awaitable[AuthUser]]:
    async def dependency(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
        ensure_role(current_user, allowed)
        return current_user

    return dependency


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    clean_email = (email or "").strip().lower()
    row = (await db.execute(select(User).where(User.email == clean_email))).scalar_one_or_none()
    if row is None or not verify_password(password, row.password_hash):
        logger.warning("Rejected login for email=%s", clean_email)
        raise CredentialsError("Invalid credentials")
    return row


async def register_user(db: AsyncSession, payload: RegisterIn) -> User:
    """Create a user and, for analysts, their support-area registrations.

    Both writes share one transaction: a failure on either side leaves
    neither the user nor any registration behind.
    """
    labels = payload.service_area_labels()
    if payload.role == UserRole.SUPPORT and not labels:
        raise RegistrationError("The service_area field is required for support users.")

    clean_email = payload.email.strip().lower()
    exists = (await db.execute(select(User.id).where(User.email == clean_email))).scalar_one_or_none()
    if exists is not None:
        raise RegistrationError("Email already registered")

    user = User(
        name=payload.name,
        email=clean_email,
        password_hash=hash_password(payload.password),
        role=payload.role.value,
    )
    try:
        db.add(user)
        await db.flush()
        if payload.role == UserRole.SUPPORT:
            await register_areas(db, user, labels)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise RegistrationError("Create Error") from exc
    except Exception:
        await db.rollback()
        raise

    await db.refresh(user)
    await db.refresh(user, attribute_names=["support_areas"])
    logger.info("Registered user id=%s role=%s areas=%s", user.id, user.role, labels)
    return user
