# backend/app/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from backend.app.api import deps
from backend.app.core.config import Settings
from backend.app.core.errors import Conflict, InvalidCredentials
from backend.app.db.base import get_db
from backend.app.models.user import User
from backend.app.schemas.user import AuthResponse, LoginRequest, UserCreate
from backend.app.security import hashing, tokens

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(user_id=user.id, username=user.username, access_token=user.access_token)


@router.post("/users", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
        user_in: UserCreate,
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(deps.get_app_settings),
):
    result = await db.execute(select(User).where(func.lower(User.email) == user_in.email))
    if result.scalars().first():
        raise Conflict("An account with this email already exists", error="Email already exists")

    result = await db.execute(
        select(User).where(func.lower(User.username) == user_in.username.lower())
    )
    if result.scalars().first():
        raise Conflict("This username is taken", error="Username already exists")

    # bcrypt is CPU bound; keep it off the event loop
    password_hash = await run_in_threadpool(
        hashing.get_password_hash, user_in.password, rounds=settings.BCRYPT_ROUNDS
    )

    new_user = User(
        username=user_in.username,
        email=user_in.email,
        hashed_password=password_hash,
        access_token=tokens.generate_access_token(),
        is_admin=user_in.email in settings.admin_emails,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        await db.rollback()
        raise Conflict("Email or username already registered", error="User already exists")
    await db.refresh(new_user)

    logger.info("Registered user %s (%s)", new_user.id, new_user.username)
    return _auth_response(new_user)


@router.post("/sessions", response_model=AuthResponse)
async def login(
        login_in: LoginRequest,
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(deps.get_app_settings),
):
    email = login_in.email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()

    # Unknown emails still pay for one bcrypt check
    password_ok = await run_in_threadpool(
        hashing.verify_password_or_dummy,
        login_in.password,
        user.hashed_password if user else None,
        rounds=settings.BCRYPT_ROUNDS,
    )
    if not user or not password_ok:
        logger.warning("Failed login for %s", email)
        raise InvalidCredentials()

    # New token replaces the stored one, so any earlier token stops working
    user.access_token = tokens.generate_access_token()
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User %s logged in", user.id)
    return _auth_response(user)
