from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

_TMP_DIR = Path(tempfile.mkdtemp(prefix="helpdesk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'import.db'}"
os.environ["RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402

PASSWORD = "secret123"


class FakeRedis:
    """In-memory stand-in for the few redis commands the app issues."""

    def __init__(self) -> None:
        self.store: dict[str, Any] = {}
        self.ttl: dict[str, int] = {}

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.store)

    async def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        self.store[key] = value
        if ex is not None:
            self.ttl[key] = ex
        return True

    async def incr(self, key: str) -> int:
        self.store[key] = int(self.store.get(key, 0)) + 1
        return self.store[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttl[key] = seconds
        return True


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    path = tmp_path / "helpdesk.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture()
def session_factory(db_url: str) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(db_url, poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture()
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr("app.services.auth.redis_client", fake)
    monkeypatch.setattr("app.middleware.rate_limit.redis_client", fake)
    return fake


@pytest.fixture()
def client(session_factory: async_sessionmaker[AsyncSession], fake_redis: FakeRedis) -> Iterator[TestClient]:
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(client: TestClient, email: str, password: str = PASSWORD) -> dict[str, str]:
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture()
def make_user(client: TestClient) -> Callable[..., tuple[dict, dict[str, str]]]:
    counter = {"n": 0}

    def _make(role: str, service_area: str | list[str] | None = None) -> tuple[dict, dict[str, str]]:
        counter["n"] += 1
        email = f"{role}{counter['n']}@example.com"
        body: dict[str, Any] = {"name": f"{role.title()} {counter['n']}", "email": email, "password": PASSWORD, "role": role}
        if service_area is not None:
            body["service_area"] = service_area
        resp = client.post("/api/register", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"], auth_headers(client, email)

    return _make
