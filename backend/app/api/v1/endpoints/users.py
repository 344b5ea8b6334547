# backend/app/api/v1/endpoints/users.py
"""
Account management endpoints.

Endpoints:
- DELETE /users/me   - remove the caller's account and thoughts
- GET /users         - list accounts (admin only)
- DELETE /users/{id} - remove an account (the account itself or an admin)

Deleting a user always deletes the thoughts they own in the same transaction.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api import deps
from backend.app.core.errors import Forbidden, NotFound
from backend.app.db.base import get_db
from backend.app.models.thought import Thought
from backend.app.models.user import User
from backend.app.schemas.user import UserDeleteResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _delete_user_and_thoughts(db: AsyncSession, user: User) -> int:
    result = await db.execute(
        delete(Thought)
        .where(Thought.user_id == user.id)
        .execution_options(synchronize_session=False)
    )
    deleted_thoughts = result.rowcount or 0
    await db.delete(user)
    await db.commit()

    logger.info("Deleted user %s and %d thought(s)", user.id, deleted_thoughts)
    return deleted_thoughts


# Declared before /{user_id} so "me" is never parsed as an id
@router.delete("/me", response_model=UserDeleteResponse)
async def delete_current_user(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    deleted_thoughts = await _delete_user_and_thoughts(db, current_user)
    return UserDeleteResponse(
        message="User and their thoughts deleted",
        deleted_thoughts=deleted_thoughts,
    )


@router.get("", response_model=List[UserResponse])
async def list_users(
        db: AsyncSession = Depends(get_db),
        admin: User = Depends(deps.get_admin_user),
):
    result = await db.execute(select(User).order_by(User.created_at))
    return result.scalars().all()


@router.delete("/{user_id}", response_model=UserDeleteResponse)
async def delete_user(
        user_id: str = Depends(deps.valid_user_id),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    if user_id != current_user.id and not current_user.is_admin:
        logger.warning("User %s tried to delete user %s", current_user.id, user_id)
        raise Forbidden("You can only delete your own account")

    user = await db.get(User, user_id)
    if not user:
        raise NotFound(f"No user with id {user_id} exists", error="User not found")

    deleted_thoughts = await _delete_user_and_thoughts(db, user)
    return UserDeleteResponse(
        message="User and their thoughts deleted",
        deleted_thoughts=deleted_thoughts,
    )
