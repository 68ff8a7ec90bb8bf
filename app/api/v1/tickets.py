from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import include_deleted_flag, ticket_out
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.ticket import TicketCreateIn, TicketOut, TicketUpdateIn
from app.services.auth import ADMIN_ONLY, FRONT_DESK, AuthUser, require_roles
from app.services.tickets import (
    create_ticket,
    list_tickets,
    require_ticket,
    restore_ticket,
    soft_delete_ticket,
    update_ticket,
)

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("", response_model=list[TicketOut])
async def get_tickets(
    include_deleted: bool = Depends(include_deleted_flag),
    db: AsyncSession = Depends(get_db),
) -> list[TicketOut]:
    return [ticket_out(row) for row in await list_tickets(db, include_deleted=include_deleted)]


@router.get("/{ticket_id}", response_model=TicketOut)
async def get_ticket(
    ticket_id: int,
    include_deleted: bool = Depends(include_deleted_flag),
    db: AsyncSession = Depends(get_db),
) -> TicketOut:
    return ticket_out(await require_ticket(db, ticket_id, include_deleted=include_deleted))


@router.post("", response_model=TicketOut, status_code=201)
async def post_ticket(
    payload: TicketCreateIn,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(FRONT_DESK)),
) -> TicketOut:
    return ticket_out(await create_ticket(db, payload))


@router.put("", response_model=TicketOut)
async def put_ticket(
    payload: TicketUpdateIn,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(FRONT_DESK)),
) -> TicketOut:
    return ticket_out(await update_ticket(db, payload))


@router.delete("/{ticket_id}", response_model=MessageResponse)
async def delete_ticket(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> MessageResponse:
    await soft_delete_ticket(db, ticket_id)
    return MessageResponse(message="Ticket deleted")


@router.post("/{ticket_id}/restore", response_model=MessageResponse)
async def post_restore_ticket(
    ticket_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> MessageResponse:
    await restore_ticket(db, ticket_id)
    return MessageResponse(message="Ticket restored successfully")
