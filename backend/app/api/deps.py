# backend/app/api/deps.py
import logging
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings
from backend.app.core.errors import (
    AuthInfrastructureError,
    Forbidden,
    InvalidToken,
    MalformedId,
    Unauthenticated,
)
from backend.app.db.base import get_db
from backend.app.models.user import User
from backend.app.security import tokens

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        authorization: Optional[str] = Header(default=None),
) -> User:
    """
    Resolve the caller from the raw token in the Authorization header.

    There are no claims, scopes or expiry: the request is authenticated iff the
    token is the one currently stored for some user.
    """
    token = tokens.extract_token(authorization)
    if token is None:
        raise Unauthenticated()

    try:
        result = await db.execute(select(User).where(User.access_token == token))
        user = result.scalars().first()
    except SQLAlchemyError as exc:
        logger.exception("Token lookup failed")
        raise AuthInfrastructureError() from exc

    if not user:
        raise InvalidToken()

    return user


async def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        logger.warning("User %s denied admin access", current_user.id)
        raise Forbidden("Admin privileges required")
    return current_user


def _object_id(value: str, resource: str) -> str:
    object_id = tokens.parse_object_id(value)
    if object_id is None:
        raise MalformedId(f"'{value}' is not a valid {resource} id")
    return object_id


def valid_thought_id(thought_id: str) -> str:
    return _object_id(thought_id, "thought")


def valid_user_id(user_id: str) -> str:
    return _object_id(user_id, "user")
