from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.common import utcnow
from app.models.ticket import Ticket
from app.schemas.ticket import TicketCreateIn, TicketUpdateIn

logger = logging.getLogger(__name__)


async def get_ticket(db: AsyncSession, ticket_id: int, *, include_deleted: bool = False) -> Ticket | None:
    stmt = select(Ticket).where(Ticket.id == ticket_id)
    if not include_deleted:
        stmt = stmt.where(Ticket.deleted_at.is_(None))
    return (await db.execute(stmt)).scalar_one_or_none()


async def require_ticket(db: AsyncSession, ticket_id: int, *, include_deleted: bool = False) -> Ticket:
    row = await get_ticket(db, ticket_id, include_deleted=include_deleted)
    if row is None:
        raise NotFoundError("Ticket not found")
    return row


async def create_ticket(db: AsyncSession, payload: TicketCreateIn) -> Ticket:
    row = Ticket(name=payload.name, client=payload.client, occupation_area=payload.occupation_area)
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info("Created ticket id=%s", row.id)
    return row


async def update_ticket(db: AsyncSession, payload: TicketUpdateIn) -> Ticket:
    row = await require_ticket(db, payload.id)
    row.name = payload.name
    row.client = payload.client
    row.occupation_area = payload.occupation_area
    await db.commit()
    await db.refresh(row)
    return row


async def list_tickets(db: AsyncSession, *, include_deleted: bool = False) -> list[Ticket]:
    stmt = select(Ticket).order_by(Ticket.id)
    if not include_deleted:
        stmt = stmt.where(Ticket.deleted_at.is_(None))
    return list((await db.execute(stmt)).scalars().all())


async def soft_delete_ticket(db: AsyncSession, ticket_id: int) -> Ticket:
    row = await require_ticket(db, ticket_id)
    row.deleted_at = utcnow()
    await db.commit()
    logger.info("Soft-deleted ticket id=%s", ticket_id)
    return row


async def restore_ticket(db: AsyncSession, ticket_id: int) -> Ticket:
    # Existence is checked regardless of the deleted marker; restoring a live row is a no-op.
    row = await require_ticket(db, ticket_id, include_deleted=True)
    if row.deleted_at is not None:
        row.deleted_at = None
        await db.commit()
        await db.refresh(row)
        logger.info("Restored ticket id=%s", ticket_id)
    return row
