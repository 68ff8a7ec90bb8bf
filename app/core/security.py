from __future__ import annotations

import base64
import hashlib
import hmac
import os

from app.core.config import settings

_SCHEME = "pbkdf2_sha256"


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii").strip()


def hash_password(password: str, *, iterations: int | None = None, salt: bytes | None = None) -> str:
    """Hash a password with a random salt.

    The result is ``pbkdf2_sha256$<iterations>$<salt>$<hash>``, so the work
    factor can be raised later without invalidating stored hashes.
    """
    rounds = int(iterations or settings.password_hash_iterations)
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{_SCHEME}${rounds}${_b64(salt)}${_b64(digest)}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        scheme, rounds, salt_b64, digest_b64 = (encoded or "").split("$", 3)
        rounds_int = int(rounds)
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
    except ValueError:
        return False
    if scheme != _SCHEME:
        return False
    candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds_int)
    return hmac.compare_digest(candidate, expected)
