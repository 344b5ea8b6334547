# backend/app/security/hashing.py
"""
Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of a password; longer inputs are cut
to that length on both hash and verify so the two always agree.
"""
from functools import lru_cache
from typing import Optional

import bcrypt

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return (password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = 12) -> str:
    raw = _encode(password)
    if not raw:
        raise ValueError("Password is empty.")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a candidate password against a stored hash via bcrypt.checkpw."""
    raw = _encode(plain_password)
    hashed = (hashed_password or "").encode("utf-8")
    if not raw or not hashed:
        return False
    try:
        return bcrypt.checkpw(raw, hashed)
    except ValueError:
        return False


@lru_cache(maxsize=None)
def dummy_hash(rounds: int = 12) -> str:
    """Fixed hash at the given cost, checked when no account matches."""
    return get_password_hash("dummy-password-never-matches", rounds=rounds)


def verify_password_or_dummy(plain_password: str, hashed_password: Optional[str], rounds: int = 12) -> bool:
    """
    Like verify_password, but always pays for one bcrypt check.

    With no stored hash it checks against `dummy_hash` and returns False, so an
    unknown account takes as long as a wrong password.
    """
    if hashed_password is None:
        verify_password(plain_password, dummy_hash(rounds))
        return False
    return verify_password(plain_password, hashed_password)
