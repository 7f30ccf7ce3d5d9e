"""
Daily record store.

Rules:
  - One record per (user_id, date); created lazily on first access and kept
    even when it never gets a task.
  - recompute() derives task counts and completion rate from the task list.
    points_earned is NOT derived here; the task service adjusts it per toggle.
  - A record is locked once its date is today or earlier. Tasks can only be
    deleted from tomorrow's record.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import dates
from app.core.errors import InvalidInput, StorageFailure
from app.records.models import DailyRecord

logger = logging.getLogger(__name__)


def require_date(value) -> str:
    """Validate a "YYYY-MM-DD" input, raising InvalidInput otherwise."""
    if not value:
        raise InvalidInput("Date required")
    if not dates.is_date_string(value):
        raise InvalidInput(f"Invalid date '{value}', expected YYYY-MM-DD")
    return value


def is_locked(date_str: str) -> bool:
    return date_str <= dates.today()


def can_delete_from(date_str: str) -> bool:
    return date_str == dates.tomorrow()


def refresh_lock(record: DailyRecord) -> DailyRecord:
    record.locked = is_locked(record.date)
    return record


def recompute(record: DailyRecord) -> DailyRecord:
    record.total_tasks = len(record.tasks)
    record.completed_tasks = sum(1 for t in record.tasks if t.completed)
    if record.total_tasks:
        record.completion_rate = record.completed_tasks / record.total_tasks * 100
    else:
        record.completion_rate = 0.0
    return record


def find_record(db: Session, user_id: str, date: str) -> Optional[DailyRecord]:
    record = db.query(DailyRecord).filter(
        DailyRecord.user_id == user_id,
        DailyRecord.date == date,
    ).first()
    if record is not None:
        refresh_lock(record)
    return record


def list_records(db: Session, user_id: str) -> list[DailyRecord]:
    records = (
        db.query(DailyRecord)
        .filter(DailyRecord.user_id == user_id)
        .order_by(DailyRecord.date.asc())
        .all()
    )
    for record in records:
        refresh_lock(record)
    return records


def build_record(db: Session, user_id: str, date: str) -> DailyRecord:
    """Fetch the record or add a zeroed one to the session without committing."""
    record = find_record(db, user_id, date)
    if record is None:
        record = DailyRecord(
            user_id=user_id,
            date=date,
            total_tasks=0,
            completed_tasks=0,
            points_earned=0,
            completion_rate=0.0,
        )
        refresh_lock(record)
        db.add(record)
    return record


def get_or_create_record(db: Session, user_id: str, date: str) -> DailyRecord:
    """Get the (user, date) record, persisting an empty one if it doesn't exist yet."""
    require_date(date)
    record = find_record(db, user_id, date)
    if record is not None:
        return record

    record = build_record(db, user_id, date)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same (user, date) first; use theirs.
        db.rollback()
        logger.info("Daily record user=%s date=%s created concurrently, re-reading", user_id, date)
        record = find_record(db, user_id, date)
        if record is None:
            raise StorageFailure("Could not create daily record")
        return record
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create daily record user=%s date=%s: %r", user_id, date, exc)
        raise StorageFailure("Could not create daily record") from exc

    db.refresh(record)
    logger.debug("Created daily record user=%s date=%s", user_id, date)
    return record
