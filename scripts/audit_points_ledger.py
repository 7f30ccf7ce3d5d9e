"""
Audit script: compare stored daily-record totals with a from-scratch recount.

points_earned on a daily record is adjusted per completion toggle rather than
recomputed. This script:
1. Recounts total_tasks / completed_tasks / completion_rate for every record
2. Compares points_earned with sum(points(difficulty)) over completed tasks
3. Prints every record that drifted on either
4. Without --fix, rolls back: a report never writes
5. With --fix, rewrites drifted records and shifts the owner's total_points by
   the points delta (floored at 0)
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from app.db.session import SessionLocal
from app.auth.models import User
from app.records.models import DailyRecord
from app.records.store import recompute
from app.stats.models import UserBadge  # noqa: F401  (mapper registry)
from app.tasks.scoring import points


def expected_points(record: DailyRecord) -> int:
    return sum(points(t.difficulty) for t in record.tasks if t.completed)


def expected_counts(record: DailyRecord) -> tuple:
    """(total_tasks, completed_tasks, completion_rate) derived from the task list."""
    total = len(record.tasks)
    completed = sum(1 for t in record.tasks if t.completed)
    rate = completed / total * 100 if total else 0.0
    return total, completed, rate


def _stored_counts(record: DailyRecord) -> tuple:
    return record.total_tasks, record.completed_tasks, record.completion_rate


def audit_points_ledger(fix: bool = False) -> int:
    """Return the number of drifted records found."""
    db = SessionLocal()
    drifted = 0

    try:
        records = db.query(DailyRecord).order_by(DailyRecord.user_id, DailyRecord.date).all()
        print(f"Auditing {len(records)} daily records", flush=True)

        for record in records:
            counts = expected_counts(record)
            expected = expected_points(record)
            points_ok = record.points_earned == expected
            counts_ok = _stored_counts(record) == counts
            if points_ok and counts_ok:
                continue

            drifted += 1
            delta = expected - (record.points_earned or 0)
            print(f"  user={record.user_id} date={record.date}", flush=True)
            if not counts_ok:
                print(f"    counts={_stored_counts(record)} expected={counts}", flush=True)
            if not points_ok:
                print(
                    f"    points_earned={record.points_earned} expected={expected} ({delta:+d})",
                    flush=True,
                )

            if fix:
                recompute(record)
                record.points_earned = expected
                owner = db.query(User).filter(User.user_id == record.user_id).first()
                if owner and delta:
                    owner.total_points = max(0, (owner.total_points or 0) + delta)

        if fix:
            db.commit()
            print(f"\n✅ Fixed {drifted} record(s)", flush=True)
        else:
            db.rollback()
            print(f"\nFound {drifted} drifted record(s). Re-run with --fix to repair.", flush=True)

    except Exception as e:
        db.rollback()
        print(f"❌ Error during audit: {e}", flush=True)
        raise
    finally:
        db.close()

    return drifted


if __name__ == "__main__":
    audit_points_ledger(fix="--fix" in sys.argv[1:])
