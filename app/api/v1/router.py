from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.services import router as services_router
from app.api.v1.support import router as support_router
from app.api.v1.tickets import router as tickets_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(support_router)
api_router.include_router(tickets_router)
api_router.include_router(services_router)
