# backend/app/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.base import get_db
from backend.app.models.thought import Thought

router = APIRouter()


@router.get("", response_model=List[str])
async def list_categories(db: AsyncSession = Depends(get_db)):
    """Distinct, non-empty categories across all thoughts, alphabetically."""
    result = await db.execute(
        select(Thought.category)
        .where(Thought.category.is_not(None), Thought.category != "")
        .distinct()
        .order_by(Thought.category)
    )
    return list(result.scalars().all())
