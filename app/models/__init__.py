from app.models.service import Service
from app.models.ticket import Ticket
from app.models.user import SupportArea, User, UserRole

__all__ = [
    "Service",
    "SupportArea",
    "Ticket",
    "User",
    "UserRole",
]
