# backend/app/models/user.py
from sqlalchemy import Boolean, Column, DateTime, String

from backend.app.db.base import Base
from backend.app.models.common import new_id, utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(20), unique=True, index=True, nullable=False)

    # Always stored lowercased
    email = Column(String(320), unique=True, index=True, nullable=False)

    # bcrypt hash only, the plaintext never reaches the database
    hashed_password = Column(String(255), nullable=False)

    # One live token per user; overwritten on every login
    access_token = Column(String(36), unique=True, index=True, nullable=True)

    is_admin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
