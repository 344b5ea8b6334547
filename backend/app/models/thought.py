# backend/app/models/thought.py
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from backend.app.db.base import Base
from backend.app.models.common import new_id, utc_now


class Thought(Base):
    __tablename__ = "thoughts"
    __table_args__ = (
        CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    message = Column(String(140), nullable=False)

    # Lowercased on the way in; NULL when the author gave none
    category = Column(String(30), index=True, nullable=True)

    hearts = Column(Integer, nullable=False, default=0)

    # Weak reference to users.id (no FK): cascades are done by the user handlers.
    # NULL marks a legacy thought without an owner, which nobody may edit.
    user_id = Column(String(36), index=True, nullable=True)
    username = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), index=True, nullable=False, default=utc_now)
