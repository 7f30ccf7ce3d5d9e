"""
Task mutations and their point/count reconciliation.

Each operation changes one daily record and the owner's profile totals and
commits both in a single transaction. Decrements are floored at 0 so replayed
or duplicate requests can't push a counter negative.

Completion history (User.daily_completion_summary) goes down only on an
explicit un-complete; deleting a completed task keeps its history entry.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core.errors import InvalidInput, NotFound, Forbidden, StorageFailure
from app.records import store
from app.records.models import DailyRecord
from app.tasks.scoring import Difficulty, points

logger = logging.getLogger(__name__)


def _floor_sub(value: int, amount: int) -> int:
    return max(0, (value or 0) - amount)


def _load_profile(db: Session, user_id: str) -> User:
    """Load the profile row, locked for the rest of the transaction where supported."""
    user = (
        db.query(User)
        .filter(User.user_id == user_id)
        .with_for_update()
        .first()
    )
    if not user:
        raise NotFound("User not found")
    return user


def _load_record(db: Session, user_id: str, date: str) -> DailyRecord:
    record = store.find_record(db, user_id, date)
    if not record:
        raise NotFound("Daily record not found")
    return record


def _commit(db: Session, action: str, user_id: str, record: DailyRecord, conflict_ok: bool = False) -> DailyRecord:
    """Commit, or roll back and raise StorageFailure.

    With conflict_ok, a unique-key violation is rolled back and re-raised as is.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_ok:
            raise
        logger.error("%s hit a unique-key conflict for user=%s date=%s", action, user_id, record.date)
        raise StorageFailure("Could not save changes") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s failed for user=%s date=%s: %r", action, user_id, record.date, exc)
        raise StorageFailure("Could not save changes") from exc
    db.refresh(record)
    return record


# ---------------------------------------------------------------------------
# ADD
# ---------------------------------------------------------------------------

def add_task(db: Session, user_id: str, date, title, difficulty=None, description=None) -> DailyRecord:
    title = title.strip() if isinstance(title, str) else title
    if not date or not title:
        raise InvalidInput("Date and title required")
    store.require_date(date)
    if isinstance(description, str):
        description = description.strip() or None

    # A concurrent request may create the same (user, date) record between our
    # lookup and commit; the second attempt appends to the winner's row.
    for attempt in (1, 2):
        user = _load_profile(db, user_id)
        record = store.build_record(db, user_id, date)

        task = record.add_task(title, Difficulty.parse(difficulty).value, description)
        store.recompute(record)
        user.total_tasks_created = (user.total_tasks_created or 0) + 1

        try:
            _commit(db, "add_task", user_id, record, conflict_ok=attempt == 1)
        except IntegrityError:
            logger.info("Daily record user=%s date=%s created concurrently, retrying add", user_id, date)
            continue
        break

    logger.info("Task added user=%s date=%s task=%s difficulty=%s", user_id, date, task.id, task.difficulty)
    return record


# ---------------------------------------------------------------------------
# TOGGLE COMPLETION
# ---------------------------------------------------------------------------

def toggle_completion(db: Session, user_id: str, date, task_id, completed) -> DailyRecord:
    if not date or not task_id:
        raise InvalidInput("Date and taskId required")
    if completed is None:
        raise InvalidInput("completed flag required")
    store.require_date(date)

    user = _load_profile(db, user_id)
    record = _load_record(db, user_id, date)
    task = record.find_task(task_id)
    if not task:
        raise NotFound("Task not found")

    was_completed = bool(task.completed)
    completed = bool(completed)
    task.completed = completed
    value = points(task.difficulty)
    if user.daily_completion_summary is None:
        user.daily_completion_summary = {}
    summary = user.daily_completion_summary

    if completed and not was_completed:
        record.points_earned = (record.points_earned or 0) + value
        user.total_tasks_completed = (user.total_tasks_completed or 0) + 1
        user.total_points = (user.total_points or 0) + value
        summary[date] = summary.get(date, 0) + 1
    elif was_completed and not completed:
        record.points_earned = _floor_sub(record.points_earned, value)
        user.total_tasks_completed = _floor_sub(user.total_tasks_completed, 1)
        user.total_points = _floor_sub(user.total_points, value)
        summary[date] = _floor_sub(summary.get(date, 0), 1)

    store.recompute(record)
    _commit(db, "toggle_completion", user_id, record)
    if completed != was_completed:
        logger.info(
            "Task %s user=%s date=%s completed=%s (%+d points)",
            task_id, user_id, date, completed, value if completed else -value,
        )
    return record


# ---------------------------------------------------------------------------
# DELETE
# ---------------------------------------------------------------------------

def delete_task(db: Session, user_id: str, date, task_id) -> DailyRecord:
    if not date or not task_id:
        raise InvalidInput("Date and taskId required")
    store.require_date(date)

    if not store.can_delete_from(date):
        raise Forbidden("Tasks can only be deleted from tomorrow's list")
    user = _load_profile(db, user_id)
    record = _load_record(db, user_id, date)
    task = record.find_task(task_id)
    if not task:
        raise NotFound("Task not found or already deleted")

    was_completed = bool(task.completed)
    value = points(task.difficulty)

    record.remove_task(task)
    store.recompute(record)
    user.total_tasks_created = _floor_sub(user.total_tasks_created, 1)
    if was_completed:
        record.points_earned = _floor_sub(record.points_earned, value)
        user.total_tasks_completed = _floor_sub(user.total_tasks_completed, 1)
        user.total_points = _floor_sub(user.total_points, value)

    _commit(db, "delete_task", user_id, record)
    logger.info("Task %s deleted user=%s date=%s", task_id, user_id, date)
    return record
