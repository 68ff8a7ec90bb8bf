from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import include_deleted_flag, service_out
from app.core.errors import NotFoundError
from app.db.session import get_db
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.service import ServiceCompleteIn, ServiceCreateIn, ServiceOut, ServiceUpdateIn
from app.services.auth import ADMIN_ONLY, FRONT_DESK, SUPPORT_DESK, AuthUser, require_roles
from app.services.service_desk import (
    associate_service,
    complete_service,
    create_service,
    list_areas,
    list_by_status,
    list_notes,
    list_services,
    list_unassigned,
    require_service,
    restore_service,
    soft_delete_service,
    update_service,
)

router = APIRouter(prefix="/services", tags=["services"])


def _non_empty(rows: list, message: str) -> list:
    if not rows:
        raise NotFoundError(message)
    return rows


@router.get("", response_model=DataResponse[list[ServiceOut]])
async def get_services(
    support_id: int | None = Query(default=None),
    ticket_id: int | None = Query(default=None),
    include_deleted: bool = Depends(include_deleted_flag),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[list[ServiceOut]]:
    rows = await list_services(
        db,
        support_id=support_id,
        ticket_id=ticket_id,
        include_deleted=include_deleted,
    )
    return DataResponse[list[ServiceOut]](data=[service_out(row) for row in rows])


@router.get("/areas", response_model=DataResponse[list[str]])
async def get_service_areas(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[list[str]]:
    return DataResponse[list[str]](data=_non_empty(await list_areas(db), "Services areas not found"))


@router.get("/types", response_model=DataResponse[list[str]])
async def get_service_types(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[list[str]]:
    return DataResponse[list[str]](data=_non_empty(await list_notes(db), "Services types not found"))


@router.get("/unassigned", response_model=DataResponse[list[ServiceOut]])
async def get_unassigned_services(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(SUPPORT_DESK)),
) -> DataResponse[list[ServiceOut]]:
    rows = _non_empty(await list_unassigned(db), "Services not found")
    return DataResponse[list[ServiceOut]](data=[service_out(row) for row in rows])


@router.get("/incomplete", response_model=DataResponse[list[ServiceOut]])
async def get_incomplete_services(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[list[ServiceOut]]:
    rows = _non_empty(await list_by_status(db, False), "No incomplete Services found")
    return DataResponse[list[ServiceOut]](data=[service_out(row) for row in rows])


@router.get("/completed", response_model=DataResponse[list[ServiceOut]])
async def get_completed_services(
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[list[ServiceOut]]:
    rows = _non_empty(await list_by_status(db, True), "No completed Services found")
    return DataResponse[list[ServiceOut]](data=[service_out(row) for row in rows])


@router.get("/{service_id}", response_model=DataResponse[ServiceOut])
async def get_service(
    service_id: int,
    include_deleted: bool = Depends(include_deleted_flag),
    db: AsyncSession = Depends(get_db),
) -> DataResponse[ServiceOut]:
    row = await require_service(db, service_id, include_deleted=include_deleted)
    return DataResponse[ServiceOut](data=service_out(row))


@router.post("", response_model=DataResponse[ServiceOut], status_code=201)
async def post_service(
    payload: ServiceCreateIn,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(FRONT_DESK)),
) -> DataResponse[ServiceOut]:
    return DataResponse[ServiceOut](data=service_out(await create_service(db, payload)))


@router.put("", response_model=DataResponse[ServiceOut])
async def put_service(
    payload: ServiceUpdateIn,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> DataResponse[ServiceOut]:
    return DataResponse[ServiceOut](data=service_out(await update_service(db, payload)))


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> MessageResponse:
    await soft_delete_service(db, service_id)
    return MessageResponse(message="Service deleted")


@router.post("/{service_id}/restore", response_model=MessageResponse)
async def post_restore_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(ADMIN_ONLY)),
) -> MessageResponse:
    await restore_service(db, service_id)
    return MessageResponse(message="Service restored successfully")


@router.put("/{service_id}/associate", response_model=DataResponse[ServiceOut])
async def put_associate_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(SUPPORT_DESK)),
) -> DataResponse[ServiceOut]:
    row = await associate_service(db, service_id, current_user)
    return DataResponse[ServiceOut](data=service_out(row))


@router.put("/{service_id}/complete", response_model=DataResponse[ServiceOut])
async def put_complete_service(
    service_id: int,
    payload: ServiceCompleteIn,
    db: AsyncSession = Depends(get_db),
    current_user: AuthUser = Depends(require_roles(SUPPORT_DESK)),
) -> DataResponse[ServiceOut]:
    row = await complete_service(db, service_id, current_user, payload)
    return DataResponse[ServiceOut](data=service_out(row))
