"""
Daily records and the tasks they own.
"""
from sqlalchemy import (
    Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.db.base import Base


class DailyRecord(Base):
    """
    One user's tasks for one calendar day, plus the derived per-day totals.
    """
    __tablename__ = "daily_records"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = Column(String(10), nullable=False)

    total_tasks = Column(Integer, nullable=False, default=0)
    completed_tasks = Column(Integer, nullable=False, default=0)
    points_earned = Column(Integer, nullable=False, default=0)
    completion_rate = Column(Float, nullable=False, default=0.0)

    # Sealed against task deletion (date <= today)
    locked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    tasks = relationship(
        "Task",
        back_populates="record",
        order_by="Task.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'date', name='uq_daily_record_user_date'),
    )

    def add_task(self, title: str, difficulty: str, description=None) -> "Task":
        position = max((t.position for t in self.tasks), default=-1) + 1
        task = Task(
            id=uuid.uuid4().hex,
            title=title,
            description=description,
            difficulty=difficulty,
            completed=False,
            position=position,
        )
        self.tasks.append(task)
        return task

    def find_task(self, task_id: str):
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def remove_task(self, task: "Task") -> None:
        self.tasks.remove(task)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)

    record_id = Column(
        Integer,
        ForeignKey("daily_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Easy | Medium | Hard, fixed after creation
    difficulty = Column(String(10), nullable=False, default="Medium")
    completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    record = relationship("DailyRecord", back_populates="tasks")
