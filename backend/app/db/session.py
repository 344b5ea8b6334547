# backend/app/db/session.py
"""
Async database handle for SQLAlchemy.

The `Database` object owns the engine and the session factory. It is created
and connected by the application lifespan, stored on `app.state.db`, and
disposed on shutdown. Nothing here is a module-level singleton, so tests can
point an application at a throwaway database.

Production considerations:
- Uses asyncpg for PostgreSQL
- Uses aiosqlite for SQLite (local development and tests)
- Pool settings differ for SQLite (no pooling) vs PostgreSQL
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from backend.app.core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Engine + session factory with an explicit connect/dispose lifecycle."""

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.url.lower()

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected. Call connect() on startup.")
        return self._engine

    def connect(self) -> None:
        """
        Create the async engine and session factory.

        SQLite:
        - NullPool (SQLite doesn't benefit from connection pooling)
        - check_same_thread=False for async compatibility

        PostgreSQL:
        - AsyncAdaptedQueuePool, pool_size=5, max_overflow=10
        - pool_pre_ping=True to detect stale connections
        - pool_recycle=300 for hosts that close idle connections
        """
        if self._engine is not None:
            return

        if self.is_sqlite:
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                poolclass=NullPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self._engine = create_async_engine(
                self.url,
                echo=self.echo,
                poolclass=AsyncAdaptedQueuePool,
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=300,
            )

        # expire_on_commit=False: attributes stay readable after commit
        # autoflush=False: explicit flush control
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine created (%s)", self._engine.url.render_as_string(hide_password=True))

    async def create_all(self, *, drop: bool = False) -> None:
        # Imported here so every model is registered on Base.metadata
        from backend.app.db.base import Base
        from backend.app.models import thought, user  # noqa: F401

        async with self.engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected. Call connect() on startup.")
        return self._session_factory()

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Creates a new session per request from the handle on `app.state.db` and
    closes it after the request completes. This does NOT auto-commit.
    """
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
