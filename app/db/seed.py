from __future__ import annotations

import asyncio
import logging
import random

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import configure_logging
from app.core.security import hash_password
from app.db.session import session_scope
from app.models.service import Service
from app.models.ticket import Ticket
from app.models.user import User, UserRole
from app.services.support import register_areas

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "123456"
AREAS = ["Billing", "Network", "Hardware", "Software", "Accounts"]
CLIENTS = ["Acme Ltd", "Globex", "Initech", "Umbrella", "Hooli", "Stark Industries"]
REQUESTERS = ["Ana Souza", "Bruno Lima", "Carla Dias", "Diego Alves", "Elisa Rocha", "Felipe Costa"]


async def _user(db: AsyncSession, *, name: str, email: str, role: UserRole) -> User:
    row = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if row is None:
        row = User(name=name, email=email, password_hash=hash_password(DEFAULT_PASSWORD), role=role.value)
        db.add(row)
        await db.flush()
    return row


async def seed(db: AsyncSession, *, rng: random.Random | None = None) -> dict[str, int]:
    """Populate a demo data set. Users are looked up by email, so reruns only add tickets and services."""
    rng = rng or random.Random(42)

    await _user(db, name="Admin", email="admin@helpdesk.local", role=UserRole.ADMIN)
    await _user(db, name="Attendant", email="attendant@helpdesk.local", role=UserRole.ATTENDANT)
    await _user(db, name="Customer", email="user@helpdesk.local", role=UserRole.USER)

    analysts: list[User] = []
    for idx, area in enumerate(AREAS, start=1):
        analyst = await _user(db, name=f"Analyst {idx}", email=f"support{idx}@helpdesk.local", role=UserRole.SUPPORT)
        labels = [area] if idx % 2 else [area, AREAS[(idx + 1) % len(AREAS)]]
        await register_areas(db, analyst, labels)
        analysts.append(analyst)

    tickets = [
        Ticket(name=f"Request #{n}", client=rng.choice(CLIENTS), occupation_area=rng.choice(AREAS))
        for n in range(1, 11)
    ]
    db.add_all(tickets)
    await db.flush()

    services: list[Service] = []
    for ticket in tickets:
        area = ticket.occupation_area
        owner = next((a for a, label in zip(analysts, AREAS) if label == area), None)
        services.append(
            Service(
                requester_name=rng.choice(REQUESTERS),
                ticket_id=ticket.id,
                service_area=area,
                support_id=owner.id if owner is not None and rng.random() < 0.6 else None,
            )
        )
    # An open walk-in plus a closed case, both in the first analyst's area.
    services.append(Service(requester_name="Walk-in", ticket_id=tickets[0].id, service_area=AREAS[0]))
    services.append(
        Service(
            requester_name="Closed case",
            ticket_id=tickets[1].id,
            service_area=AREAS[0],
            support_id=analysts[0].id,
            status=True,
            notes="Resolved over the phone",
        )
    )
    db.add_all(services)
    await db.flush()

    counts = {"support_users": len(analysts), "tickets": len(tickets), "services": len(services)}
    logger.info("Seeded %s", counts)
    return counts


async def _main() -> None:
    async with session_scope() as db:
        await seed(db)


def main() -> None:
    configure_logging()
    asyncio.run(_main())


if __name__ == "__main__":
    main()
