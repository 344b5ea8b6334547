# backend/app/db/base.py
"""
SQLAlchemy declarative base and re-exports of the session helpers.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Usage:
        class User(Base):
            __tablename__ = "users"
            id = Column(String(36), primary_key=True)
            ...
    """
    pass


from backend.app.db.session import Database, get_db  # noqa: E402

__all__ = [
    "Base",
    "Database",
    "get_db",
]
