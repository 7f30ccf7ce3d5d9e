"""
Seed two demo accounts (alice, bob) with completion history and a few tasks.

Run against a development database only: existing demo accounts are deleted
and recreated. Password for both is "password123".
"""
import sys
import os
from datetime import timedelta

# Add the parent directory to the path so we can import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.db.base import Base, engine
from app.db.session import SessionLocal
from app.auth.models import User
from app.core import dates
from app.core.security import hash_password
from app.records.models import DailyRecord
from app.records.store import recompute, refresh_lock
from app.stats.models import UserBadge  # noqa: F401  (mapper registry)
from app.tasks.scoring import points

DEMO_USERS = [
    {"username": "alice", "email": "alice@email.com", "streak": 7, "highest": 15},
    {"username": "bob", "email": "bob@email.com", "streak": 5, "highest": 10},
]

DEMO_TASKS = [
    ("Morning run", "Medium", True),
    ("Read 20 pages", "Easy", True),
    ("Finish project report", "Hard", False),
]


def _seed_user(db, demo: dict) -> User:
    existing = db.query(User).filter(User.username == demo["username"]).first()
    if existing:
        db.delete(existing)
        db.flush()

    user = User(
        username=demo["username"],
        email=demo["email"],
        password_hash=hash_password("password123"),
        total_points=0,
        total_tasks_completed=0,
        total_tasks_created=0,
        current_streak=demo["streak"],
        highest_streak=demo["highest"],
        last_rollover_date=dates.today(),
        daily_completion_summary={},
    )
    db.add(user)
    db.flush()

    today = dates.parse_date(dates.today())
    for offset in range(demo["streak"], 0, -1):
        day = dates.format_date(today - timedelta(days=offset))
        record = DailyRecord(user_id=user.user_id, date=day, points_earned=0)
        db.add(record)
        for title, difficulty, completed in DEMO_TASKS:
            task = record.add_task(title, difficulty)
            task.completed = completed
            user.total_tasks_created += 1
            if completed:
                value = points(difficulty)
                record.points_earned += value
                user.total_points += value
                user.total_tasks_completed += 1
                user.daily_completion_summary[day] = user.daily_completion_summary.get(day, 0) + 1
        recompute(record)
        refresh_lock(record)

    return user


def seed_demo_users():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        for demo in DEMO_USERS:
            user = _seed_user(db, demo)
            print(
                f"Seeded {user.username}: points={user.total_points} "
                f"streak={user.current_streak} days={len(user.daily_completion_summary)}",
                flush=True,
            )
        db.commit()
        print("✅ Demo data ready", flush=True)
    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding demo data: {e}", flush=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_users()
