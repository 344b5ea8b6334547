# backend/app/api/v1/endpoints/thoughts.py
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api import deps
from backend.app.core.config import Settings
from backend.app.core.errors import Forbidden, NotFound, ValidationError
from backend.app.db.base import get_db
from backend.app.models.thought import Thought
from backend.app.models.user import User
from backend.app.schemas.thought import (
    ThoughtCreate,
    ThoughtDeleteResponse,
    ThoughtPage,
    ThoughtResponse,
    ThoughtUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SORT_OPTIONS = ("hearts", "date")


async def _get_thought_or_404(db: AsyncSession, thought_id: str) -> Thought:
    thought = await db.get(Thought, thought_id)
    if not thought:
        raise NotFound(f"No thought with id {thought_id} exists", error="Thought not found")
    return thought


def _ensure_owner(thought: Thought, user: User) -> None:
    """
    Only the author may change or remove a thought.

    Thoughts without an owner (created before ownership was recorded) are
    read-only for everybody.
    """
    if thought.user_id is None:
        logger.warning("User %s tried to modify unowned thought %s", user.id, thought.id)
        raise Forbidden("This thought has no owner and cannot be modified")
    if thought.user_id != user.id:
        logger.warning("User %s tried to modify thought %s owned by %s", user.id, thought.id, thought.user_id)
        raise Forbidden("You can only modify your own thoughts")


# 1. LIST (GET) - filter, sort, paginate
@router.get("", response_model=ThoughtPage)
async def list_thoughts(
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(deps.get_app_settings),
        category: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = Query(default=1, ge=1),
        limit: Optional[int] = Query(default=None, ge=1),
):
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    if limit > settings.MAX_PAGE_SIZE:
        raise ValidationError(f"limit: must be at most {settings.MAX_PAGE_SIZE}")

    # An empty sort= means the default order
    sort = (sort or "").strip().lower() or "date"
    if sort not in SORT_OPTIONS:
        raise ValidationError(f"sort: must be one of {', '.join(SORT_OPTIONS)}")

    query = select(Thought)
    count_query = select(func.count()).select_from(Thought)

    category = (category or "").strip().lower()
    if category:
        query = query.where(Thought.category == category)
        count_query = count_query.where(Thought.category == category)

    if sort == "hearts":
        query = query.order_by(Thought.hearts.desc(), Thought.created_at.desc(), Thought.id)
    else:
        query = query.order_by(Thought.created_at.desc(), Thought.id)

    query = query.offset((page - 1) * limit).limit(limit)

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(query)
    thoughts = result.scalars().all()

    return ThoughtPage(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
        results=[ThoughtResponse.model_validate(t) for t in thoughts],
    )


# 2. GET ONE
@router.get("/{thought_id}", response_model=ThoughtResponse)
async def read_thought(
        thought_id: str = Depends(deps.valid_thought_id),
        db: AsyncSession = Depends(get_db),
):
    return await _get_thought_or_404(db, thought_id)


# 3. CREATE (POST)
@router.post("", response_model=ThoughtResponse, status_code=status.HTTP_201_CREATED)
async def create_thought(
        thought_in: ThoughtCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    new_thought = Thought(
        **thought_in.model_dump(),
        hearts=0,
        user_id=current_user.id,
        username=current_user.username,
    )
    db.add(new_thought)
    await db.commit()
    await db.refresh(new_thought)
    logger.info("User %s created thought %s", current_user.id, new_thought.id)
    return new_thought


# 4. LIKE (POST) - open to everybody, one atomic increment per call
@router.post("/{thought_id}/like", response_model=ThoughtResponse)
async def like_thought(
        thought_id: str = Depends(deps.valid_thought_id),
        db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        update(Thought)
        .where(Thought.id == thought_id)
        .values(hearts=Thought.hearts + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFound(f"No thought with id {thought_id} exists", error="Thought not found")
    await db.commit()

    return await db.get(Thought, thought_id, populate_existing=True)


# 5. UPDATE (PATCH) - owner only
@router.patch("/{thought_id}", response_model=ThoughtResponse)
async def update_thought(
        thought_in: ThoughtUpdate,
        thought_id: str = Depends(deps.valid_thought_id),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    thought = await _get_thought_or_404(db, thought_id)
    _ensure_owner(thought, current_user)

    update_data = thought_in.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(thought, key, value)

    db.add(thought)
    await db.commit()
    await db.refresh(thought)
    return thought


# 6. DELETE - owner only, checked before anything is removed
@router.delete("/{thought_id}", response_model=ThoughtDeleteResponse)
async def delete_thought(
        thought_id: str = Depends(deps.valid_thought_id),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    thought = await _get_thought_or_404(db, thought_id)
    _ensure_owner(thought, current_user)

    deleted = ThoughtResponse.model_validate(thought)
    await db.delete(thought)
    await db.commit()
    logger.info("User %s deleted thought %s", current_user.id, thought_id)

    return ThoughtDeleteResponse(message="Thought deleted", deleted=deleted)
