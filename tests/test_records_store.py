import pytest

from app.core.errors import InvalidInput
from app.records import store
from app.records.models import DailyRecord


def test_get_or_create_persists_zeroed_record(db, make_user):
    user = make_user()

    record = store.get_or_create_record(db, user.user_id, "2025-11-30")

    assert record.id is not None
    assert record.tasks == []
    assert (record.total_tasks, record.completed_tasks, record.points_earned) == (0, 0, 0)
    assert record.completion_rate == 0
    # Visiting a day with no tasks still leaves a stored slot behind.
    assert db.query(DailyRecord).filter_by(user_id=user.user_id, date="2025-11-30").count() == 1


def test_get_or_create_returns_existing_record(db, make_user):
    user = make_user()
    first = store.get_or_create_record(db, user.user_id, "2025-11-30")
    second = store.get_or_create_record(db, user.user_id, "2025-11-30")

    assert first.id == second.id
    assert db.query(DailyRecord).count() == 1


def test_records_are_scoped_per_user(db, make_user):
    alice = make_user("alice")
    bob = make_user("bob")

    a = store.get_or_create_record(db, alice.user_id, "2025-11-30")
    b = store.get_or_create_record(db, bob.user_id, "2025-11-30")

    assert a.id != b.id


@pytest.mark.parametrize("bad", [None, "", "30-11-2025"])
def test_get_or_create_requires_valid_date(db, make_user, bad):
    user = make_user()
    with pytest.raises(InvalidInput):
        store.get_or_create_record(db, user.user_id, bad)


def test_recompute_derives_counts_but_not_points(db, make_user):
    user = make_user()
    record = store.build_record(db, user.user_id, "2025-11-30")
    record.add_task("a", "Easy")
    record.add_task("b", "Hard").completed = True
    record.add_task("c", "Medium").completed = True
    record.add_task("d", "Medium")
    record.points_earned = 7

    store.recompute(record)

    assert record.total_tasks == 4
    assert record.completed_tasks == 2
    assert record.completion_rate == 50
    assert record.points_earned == 7


def test_lock_flag_follows_today(db, make_user, clock):
    user = make_user()
    past = store.get_or_create_record(db, user.user_id, "2025-11-29")
    today = store.get_or_create_record(db, user.user_id, "2025-11-30")
    tomorrow = store.get_or_create_record(db, user.user_id, "2025-12-01")

    assert past.locked and today.locked
    assert not tomorrow.locked

    clock.set(2025, 12, 1)
    assert store.find_record(db, user.user_id, "2025-12-01").locked


def test_only_tomorrow_allows_deletion(clock):
    clock.set(2025, 11, 30)
    assert store.can_delete_from("2025-12-01")
    assert not store.can_delete_from("2025-11-30")
    assert not store.can_delete_from("2025-11-29")
    assert not store.can_delete_from("2025-12-02")


def test_list_records_ordered_by_date(db, make_user):
    user = make_user()
    for day in ["2025-11-30", "2025-11-28", "2025-11-29"]:
        store.get_or_create_record(db, user.user_id, day)

    assert [r.date for r in store.list_records(db, user.user_id)] == [
        "2025-11-28", "2025-11-29", "2025-11-30",
    ]
