from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, FieldValidationError, NotFoundError
from app.models.common import utcnow
from app.models.service import Service
from app.models.ticket import Ticket
from app.models.user import SupportArea, User, UserRole
from app.schemas.service import ServiceCompleteIn, ServiceCreateIn, ServiceUpdateIn
from app.services.auth import AuthUser
from app.services.support import areas_for_user

logger = logging.getLogger(__name__)

ASSIGNMENT_CONFLICT = (
    "There is already an analyst responding to this service "
    "or the service area does not match any support."
)
NOT_ASSIGNEE = "Service not found or not belonging to the user"


def match_support_area(areas: Iterable[SupportArea], service_area: str) -> SupportArea | None:
    """First registration whose label equals the service area exactly."""
    for area in areas:
        if area.service_area == service_area:
            return area
    return None


async def get_service(db: AsyncSession, service_id: int, *, include_deleted: bool = False) -> Service | None:
    stmt = select(Service).where(Service.id == service_id)
    if not include_deleted:
        stmt = stmt.where(Service.deleted_at.is_(None))
    return (await db.execute(stmt)).scalar_one_or_none()


async def require_service(db: AsyncSession, service_id: int, *, include_deleted: bool = False) -> Service:
    row = await get_service(db, service_id, include_deleted=include_deleted)
    if row is None:
        raise NotFoundError("Service not found")
    return row


async def _validate_references(
    db: AsyncSession, ticket_id: int, support_id: int | None, *, check_ticket: bool = True
) -> None:
    errors: dict[str, list[str]] = {}
    if check_ticket:
        ticket = (
            await db.execute(select(Ticket.id).where(Ticket.id == ticket_id, Ticket.deleted_at.is_(None)))
        ).scalar_one_or_none()
        if ticket is None:
            errors["ticket_id"] = ["Ticket not found"]
    if support_id is not None:
        role = (await db.execute(select(User.role).where(User.id == support_id))).scalar_one_or_none()
        if role != UserRole.SUPPORT.value:
            errors["support_id"] = ["Support user not found"]
    if errors:
        raise FieldValidationError(errors)


async def create_service(db: AsyncSession, payload: ServiceCreateIn) -> Service:
    await _validate_references(db, payload.ticket_id, payload.support_id)
    row = Service(
        requester_name=payload.requester_name,
        ticket_id=payload.ticket_id,
        service_area=payload.service_area,
        support_id=payload.support_id,
        status=False,
        notes="",
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info("Created service id=%s ticket_id=%s area=%r", row.id, row.ticket_id, row.service_area)
    return row


async def update_service(db: AsyncSession, payload: ServiceUpdateIn) -> Service:
    row = await require_service(db, payload.service_id)
    # A service keeps its current ticket even after that ticket is soft-deleted.
    await _validate_references(
        db, payload.ticket_id, payload.support_id, check_ticket=payload.ticket_id != row.ticket_id
    )
    row.requester_name = payload.requester_name
    row.ticket_id = payload.ticket_id
    row.service_area = payload.service_area
    row.support_id = payload.support_id
    await db.commit()
    await db.refresh(row)
    return row


async def list_services(
    db: AsyncSession,
    *,
    support_id: int | None = None,
    ticket_id: int | None = None,
    status: bool | None = None,
    unassigned: bool = False,
    include_deleted: bool = False,
) -> list[Service]:
    stmt = select(Service).order_by(Service.id)
    if not include_deleted:
        stmt = stmt.where(Service.deleted_at.is_(None))
    if support_id is not None:
        stmt = stmt.where(Service.support_id == support_id)
    if ticket_id is not None:
        stmt = stmt.where(Service.ticket_id == ticket_id)
    if status is not None:
        stmt = stmt.where(Service.status.is_(status))
    if unassigned:
        stmt = stmt.where(Service.support_id.is_(None))
    return list((await db.execute(stmt)).scalars().all())


async def list_unassigned(db: AsyncSession) -> list[Service]:
    return await list_services(db, unassigned=True)


async def list_by_status(db: AsyncSession, complete: bool) -> list[Service]:
    return await list_services(db, status=complete)


async def list_areas(db: AsyncSession) -> list[str]:
    # Duplicates are kept: one entry per live service.
    stmt = select(Service.service_area).where(Service.deleted_at.is_(None)).order_by(Service.id)
    return list((await db.execute(stmt)).scalars().all())


async def list_notes(db: AsyncSession) -> list[str]:
    stmt = select(Service.notes).where(Service.deleted_at.is_(None)).order_by(Service.id)
    return list((await db.execute(stmt)).scalars().all())


async def soft_delete_service(db: AsyncSession, service_id: int) -> Service:
    row = await require_service(db, service_id)
    row.deleted_at = utcnow()
    await db.commit()
    logger.info("Soft-deleted service id=%s", service_id)
    return row


async def restore_service(db: AsyncSession, service_id: int) -> Service:
    row = await require_service(db, service_id, include_deleted=True)
    if row.deleted_at is not None:
        row.deleted_at = None
        await db.commit()
        await db.refresh(row)
        logger.info("Restored service id=%s", service_id)
    return row


async def associate_service(db: AsyncSession, service_id: int, caller: AuthUser) -> Service:
    """Assign the calling analyst to a service in one of their registered areas.

    The write is a conditional UPDATE on ``support_id IS NULL`` so that two
    analysts racing for the same service cannot both win; the loser gets the
    same conflict as an area mismatch.
    """
    row = await require_service(db, service_id)
    if row.support_id is not None:
        logger.warning("Service id=%s already assigned, user id=%s rejected", service_id, caller.id)
        raise ConflictError(ASSIGNMENT_CONFLICT)

    matched = match_support_area(await areas_for_user(db, caller.id), row.service_area)
    if matched is None:
        logger.warning("No area match for service id=%s area=%r user id=%s", service_id, row.service_area, caller.id)
        raise ConflictError(ASSIGNMENT_CONFLICT)

    result = await db.execute(
        update(Service)
        .where(
            Service.id == service_id,
            Service.support_id.is_(None),
            Service.deleted_at.is_(None),
        )
        .values(support_id=caller.id, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        logger.warning("Lost assignment race for service id=%s user id=%s", service_id, caller.id)
        raise ConflictError(ASSIGNMENT_CONFLICT)

    await db.commit()
    await db.refresh(row)
    logger.info("Assigned service id=%s to user id=%s via area id=%s", service_id, caller.id, matched.id)
    return row


async def complete_service(
    db: AsyncSession,
    service_id: int,
    caller: AuthUser,
    payload: ServiceCompleteIn,
) -> Service:
    row = await get_service(db, service_id)
    if row is None or row.support_id != caller.id:
        raise NotFoundError(NOT_ASSIGNEE)

    row.status = payload.status
    row.notes = payload.notes
    await db.commit()
    await db.refresh(row)
    logger.info("Service id=%s marked status=%s by user id=%s", service_id, row.status, caller.id)
    return row
