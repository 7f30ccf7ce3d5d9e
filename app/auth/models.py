from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class User(Base):
    """
    Account plus the per-user running totals (the profile aggregate).

    Cross-date statistics live here only; daily records report per-date
    facts and never recompute these counters.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Stable external identifier. Tokens, records and badges reference this.
    user_id = Column(
        String(36),
        unique=True,
        index=True,
        nullable=False,
        default=lambda: str(uuid.uuid4())
    )

    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    total_points = Column(Integer, nullable=False, default=0)
    total_tasks_completed = Column(Integer, nullable=False, default=0)
    total_tasks_created = Column(Integer, nullable=False, default=0)

    current_streak = Column(Integer, nullable=False, default=0)
    highest_streak = Column(Integer, nullable=False, default=0)

    # "YYYY-MM-DD" of the last day the streak rollover ran, NULL before the first one
    last_rollover_date = Column(String(10), nullable=True)

    # {"YYYY-MM-DD": tasks completed that day}
    daily_completion_summary = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Track when user was last active (updated on every authenticated request)
    last_active = Column(DateTime(timezone=True), nullable=True)

    records = relationship(
        "DailyRecord",
        cascade="all, delete-orphan",
    )
    badges = relationship(
        "UserBadge",
        cascade="all, delete-orphan",
    )
