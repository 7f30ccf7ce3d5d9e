"""
Stats payload for the dashboard.
"""
import logging

from app.auth.models import User
from app.core.dates import to_heatmap_key

logger = logging.getLogger(__name__)


def build_heatmap_data(summary) -> dict[str, int]:
    """Map {"YYYY-MM-DD": count} to {"<epoch seconds>": count} for the calendar heatmap."""
    calendar_data = {}
    for date_str, count in (summary or {}).items():
        try:
            calendar_data[str(to_heatmap_key(date_str))] = count
        except ValueError:
            logger.warning("Invalid date format in daily_completion_summary: %s", date_str)
    return calendar_data


def build_stats(user: User) -> dict:
    completed = user.total_tasks_completed or 0
    created = user.total_tasks_created or 0
    return {
        "username": user.username,
        "total_tasks_completed": completed,
        "total_tasks_started": created,
        "tasks_missed": max(0, created - completed),
        "total_points": user.total_points or 0,
        "current_streak": user.current_streak or 0,
        "highest_streak": user.highest_streak or 0,
        "calendar_heatmap_data": build_heatmap_data(user.daily_completion_summary),
    }
