"""
API routes for user stats and progress.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core.deps import get_rolled_over_user
from app.db.session import get_db
from app.stats.badges import check_badges, get_user_badges
from app.stats.service import build_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/stats")
def get_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    """
    Return totals, streaks, calendar heatmap data and badges for the dashboard.
    """
    stats = build_stats(user)
    # Badges are checked opportunistically; a failure here never breaks stats.
    try:
        check_badges(db, user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Badge check failed for user=%s: %r", stats["username"], exc)
    stats["badges"] = get_user_badges(db, user.user_id)
    return stats
