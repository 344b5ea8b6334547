# backend/app/security/tokens.py
"""
Opaque access tokens.

A token is a random UUID4 stored verbatim on the user row. It carries no
claims and never expires; it is valid exactly while it is the value stored
for some user.
"""
import uuid
from typing import Optional

BEARER_SCHEME = "bearer"


def generate_access_token() -> str:
    return str(uuid.uuid4())


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header value.

    The header normally carries the raw token. A "Bearer " prefix is accepted
    and stripped for clients that add it. Returns None for a blank header.
    """
    parts = (authorization or "").split(None, 1)
    if not parts:
        return None
    if parts[0].lower() == BEARER_SCHEME:
        return parts[1].strip() if len(parts) > 1 else None
    return authorization.strip()


def parse_object_id(value: str) -> Optional[str]:
    """Return the canonical form of a store id, or None if it is malformed."""
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError):
        return None
