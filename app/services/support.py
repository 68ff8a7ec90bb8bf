from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import FieldValidationError
from app.models.service import Service
from app.models.user import SupportArea, User, UserRole

logger = logging.getLogger(__name__)


async def register_areas(db: AsyncSession, user: User, labels: Iterable[str]) -> list[SupportArea]:
    """Register the areas a support analyst serves. Does not commit."""
    clean: list[str] = []
    for raw in labels:
        label = str(raw or "").strip()
        if not label:
            raise FieldValidationError({"service_area": ["must not be blank"]})
        if label not in clean:
            clean.append(label)

    known = set(
        (
            await db.execute(select(SupportArea.service_area).where(SupportArea.user_id == user.id))
        ).scalars().all()
    )
    rows = [SupportArea(user_id=user.id, service_area=label) for label in clean if label not in known]
    db.add_all(rows)
    await db.flush()
    return rows


async def areas_for_user(db: AsyncSession, user_id: int) -> list[SupportArea]:
    return list(
        (
            await db.execute(
                select(SupportArea).where(SupportArea.user_id == user_id).order_by(SupportArea.id)
            )
        ).scalars().all()
    )


async def _services_by_support(db: AsyncSession, user_ids: list[int]) -> dict[int, list[Service]]:
    grouped: dict[int, list[Service]] = {uid: [] for uid in user_ids}
    if not user_ids:
        return grouped
    rows = (
        await db.execute(
            select(Service)
            .where(Service.support_id.in_(user_ids), Service.deleted_at.is_(None))
            .order_by(Service.id)
        )
    ).scalars().all()
    for row in rows:
        grouped[int(row.support_id)].append(row)
    return grouped


async def list_support_users(db: AsyncSession) -> list[tuple[User, list[Service]]]:
    users = (
        await db.execute(select(User).where(User.role == UserRole.SUPPORT.value).order_by(User.id))
    ).scalars().all()
    services = await _services_by_support(db, [u.id for u in users])
    return [(user, services[user.id]) for user in users]


async def list_available_support(db: AsyncSession) -> list[tuple[User, list[Service]]]:
    """Support users without any open service assigned to them."""
    open_work = exists().where(
        and_(
            Service.support_id == User.id,
            Service.status.is_(False),
            Service.deleted_at.is_(None),
        )
    )
    users = (
        await db.execute(
            select(User).where(User.role == UserRole.SUPPORT.value, ~open_work).order_by(User.id)
        )
    ).scalars().all()
    services = await _services_by_support(db, [u.id for u in users])
    return [(user, services[user.id]) for user in users]
