"""
Badge system.
Awards: first_task, streak_7, streak_30, points_1000
Each awarded at most once (UNIQUE user_id+key). Streak badges use
highest_streak, so a later streak reset doesn't hide them.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core import dates
from app.stats.models import UserBadge

logger = logging.getLogger(__name__)

# Badge definitions for display
BADGES = {
    "first_task":  {"icon": "✅", "label": "First Task",     "desc": "Completed your first task"},
    "streak_7":    {"icon": "🔥", "label": "7-Day Streak",   "desc": "Kept a 7-day streak"},
    "streak_30":   {"icon": "🌟", "label": "30-Day Streak",  "desc": "Kept a 30-day streak"},
    "points_1000": {"icon": "🏆", "label": "1000 Points",    "desc": "Earned 1000 points"},
}


def _award(db: Session, user_id: str, key: str) -> bool:
    """Try to award a badge. Returns True if newly awarded, False if already had."""
    existing = db.query(UserBadge).filter_by(user_id=user_id, key=key).first()
    if existing:
        return False
    db.add(UserBadge(user_id=user_id, key=key, earned_on=dates.today()))
    try:
        db.commit()
    except IntegrityError:
        # Awarded by a concurrent request
        db.rollback()
        return False
    logger.info("user=%s earned badge '%s'", user_id, key)
    return True


def earned_keys(user: User) -> list[str]:
    keys = []
    if (user.total_tasks_completed or 0) >= 1:
        keys.append("first_task")
    if (user.highest_streak or 0) >= 7:
        keys.append("streak_7")
    if (user.highest_streak or 0) >= 30:
        keys.append("streak_30")
    if (user.total_points or 0) >= 1000:
        keys.append("points_1000")
    return keys


def check_badges(db: Session, user: User) -> list[str]:
    """Award every badge the user qualifies for. Returns the newly awarded keys."""
    user_id = user.user_id
    return [key for key in earned_keys(user) if _award(db, user_id, key)]


def get_user_badges(db: Session, user_id: str) -> list[dict]:
    """Return list of all badges with earned flag and date."""
    rows = db.query(UserBadge).filter_by(user_id=user_id).all()
    earned = {r.key: r.earned_on for r in rows}
    result = []
    for key, meta in BADGES.items():
        item = {
            "key": key,
            "icon": meta["icon"],
            "label": meta["label"],
            "desc": meta["desc"],
            "earned": key in earned,
        }
        if key in earned:
            item["earned_on"] = earned[key]
        result.append(item)
    return result
