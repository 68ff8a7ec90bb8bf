from __future__ import annotations

from fastapi import Depends, Query

from app.models.service import Service
from app.models.ticket import Ticket
from app.models.user import User, UserRole
from app.schemas.auth import UserOut
from app.schemas.service import ServiceOut
from app.schemas.support import SupportUserOut
from app.schemas.ticket import TicketOut
from app.services.auth import ADMIN_ONLY, AuthUser, ensure_role, get_current_user


def ticket_out(row: Ticket) -> TicketOut:
    return TicketOut(
        id=row.id,
        name=row.name,
        client=row.client,
        occupation_area=row.occupation_area,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def service_out(row: Service) -> ServiceOut:
    return ServiceOut(
        id=row.id,
        requester_name=row.requester_name,
        ticket_id=row.ticket_id,
        service_area=row.service_area,
        support_id=row.support_id,
        status=row.status,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def user_out(row: User) -> UserOut:
    return UserOut(
        id=row.id,
        name=row.name,
        email=row.email,
        role=UserRole(row.role),
        service_areas=[a.service_area for a in row.support_areas],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def support_user_out(row: User, services: list[Service]) -> SupportUserOut:
    return SupportUserOut(
        id=row.id,
        name=row.name,
        email=row.email,
        service_areas=[a.service_area for a in row.support_areas],
        services=[service_out(s) for s in services],
    )


async def include_deleted_flag(
    include_deleted: bool = Query(default=False),
    current_user: AuthUser = Depends(get_current_user),
) -> bool:
    # Only admins may look at soft-deleted rows.
    if include_deleted:
        ensure_role(current_user, ADMIN_ONLY)
    return include_deleted
