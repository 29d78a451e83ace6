"""Argon2id password hashing for stored account secrets."""

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from ..config import get_settings

_DUMMY_PASSWORD = "qfoods-unknown-account"


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(plain: str) -> str:
    """Return a salted Argon2id hash in PHC string format."""
    if not plain:
        raise ValueError("password must not be empty")
    return get_password_hasher().hash(plain)


def verify_password(secret: str, plain: str) -> bool:
    """Check ``plain`` against a stored hash; comparison is constant time.

    An empty ``plain`` still pays for a full verification so that every
    failed login costs the same.
    """
    if not secret:
        return False
    try:
        return get_password_hasher().verify(secret, plain)
    except (VerificationError, InvalidHashError):
        return False


@lru_cache(maxsize=1)
def _dummy_secret() -> str:
    return hash_password(_DUMMY_PASSWORD)


def verify_unknown_account(plain: str) -> bool:
    """Spend the same verification work as a real account, always failing."""
    verify_password(_dummy_secret(), plain)
    return False
