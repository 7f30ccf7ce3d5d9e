"""
Daily streak rollover.

Runs on a user's first request of each local calendar day:
  - yesterday had >= 1 completed task -> current_streak + 1
  - otherwise                         -> current_streak = 0
  - highest_streak follows current_streak upwards
  - last_rollover_date = today, so later calls the same day are no-ops

The write is a compare-and-swap on last_rollover_date, so two requests racing
through the same day apply the transition once. Failures are logged and
swallowed: a broken rollover must not fail the request that triggered it.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core import dates

logger = logging.getLogger(__name__)


def advance_streak(current: int, highest: int, completed_yesterday: int) -> tuple[int, int]:
    """Return the (current_streak, highest_streak) pair after one day rolls over."""
    if completed_yesterday > 0:
        current = (current or 0) + 1
    else:
        current = 0
    return current, max(highest or 0, current)


def process_rollover(db: Session, user_id: str) -> bool:
    """Roll the user's streak over to today. Returns True if this call applied it."""
    try:
        user = db.query(User).filter(User.user_id == user_id).first()
        if not user:
            logger.warning("User not found for rollover: %s", user_id)
            return False

        today = dates.today()
        yesterday = dates.yesterday()

        if user.last_rollover_date == today:
            return False

        summary = user.daily_completion_summary or {}
        completed_yesterday = summary.get(yesterday, 0) or 0
        current, highest = advance_streak(user.current_streak, user.highest_streak, completed_yesterday)

        updated = (
            db.query(User)
            .filter(
                User.user_id == user_id,
                or_(User.last_rollover_date.is_(None), User.last_rollover_date != today),
            )
            .update(
                {
                    User.current_streak: current,
                    User.highest_streak: highest,
                    User.last_rollover_date: today,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            db.rollback()
            logger.info("Rollover for user=%s already applied by a concurrent request", user_id)
            return False

        db.commit()
        logger.info(
            "Rollover user=%s date=%s completed_yesterday=%s streak=%s highest=%s",
            user_id, today, completed_yesterday, current, highest,
        )
        return True
    except Exception:
        db.rollback()
        logger.exception("Error processing daily rollover for user=%s", user_id)
        return False
