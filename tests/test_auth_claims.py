import time

import jwt
import pytest

from app.core.config import settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.models.user import User, UserRole
from app.services.auth import (
    ADMIN_ONLY,
    FRONT_DESK,
    AuthUser,
    _decode_token,
    _parse_payload,
    ensure_role,
    issue_token,
)


def test_parse_payload_success() -> None:
    user = _parse_payload(
        {
            "sub": "123",
            "email": "U@Example.com",
            "name": "User",
            "role": "support",
            "jti": "abc",
            "exp": 1700000000,
        }
    )
    assert user.id == 123
    assert user.email == "u@example.com"
    assert user.role is UserRole.SUPPORT
    assert user.token_id == "abc"
    assert user.token_expires_at == 1700000000


def test_parse_payload_requires_sub() -> None:
    with pytest.raises(UnauthorizedError):
        _parse_payload({"email": "u@example.com", "role": "user"})


def test_parse_payload_rejects_unknown_role() -> None:
    with pytest.raises(UnauthorizedError):
        _parse_payload({"sub": "1", "role": "superuser"})


def test_issued_token_decodes_to_same_identity() -> None:
    user = User(id=7, name="Ana", email="ana@example.com", role="attendant", password_hash="x")
    token, ttl = issue_token(user)
    claims = _parse_payload(_decode_token(token))
    assert ttl == settings.jwt_ttl_seconds
    assert claims.id == 7
    assert claims.role is UserRole.ATTENDANT
    assert claims.token_id


def test_expired_token_is_rejected() -> None:
    user = User(id=7, name="Ana", email="ana@example.com", role="user", password_hash="x")
    token, _ = issue_token(user, now=int(time.time()) - settings.jwt_ttl_seconds - 3600)
    with pytest.raises(UnauthorizedError):
        _decode_token(token)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "1", "role": "admin"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        _decode_token(token)


def test_ensure_role_gate() -> None:
    attendant = AuthUser(id=1, email="a@example.com", name="A", role=UserRole.ATTENDANT)
    ensure_role(attendant, FRONT_DESK)
    with pytest.raises(ForbiddenError) as excinfo:
        ensure_role(attendant, ADMIN_ONLY)
    assert excinfo.value.status_code == 401
    assert "admin" in excinfo.value.detail
