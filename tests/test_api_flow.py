from datetime import date, datetime

from app.auth.models import User
from app.core.security import create_access_token
from app.records.models import DailyRecord


def _add(client, headers, date="2025-11-30", title="Task", difficulty=None):
    body = {"date": date, "title": title}
    if difficulty:
        body["difficulty"] = difficulty
    resp = client.post("/api/dailyrecords/addTask", json=body, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health_check(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_requests_without_token_are_rejected(client):
    resp = client.get("/api/stats")
    assert resp.status_code == 401
    assert "application/json" in resp.headers.get("content-type", "").lower()


def test_token_for_deleted_user_is_rejected(client):
    headers = {"Authorization": f"Bearer {create_access_token('ghost')}"}
    assert client.get("/api/stats", headers=headers).status_code == 401


def test_signup_rejects_duplicates(client, auth_headers):
    resp = client.post(
        "/auth/signup",
        data={"email": "api@example.com", "username": "other", "password": "x"},
    )
    assert resp.status_code == 400


def test_login_with_wrong_password(client, auth_headers):
    resp = client.post("/auth/login", data={"email_or_username": "apiuser", "password": "bad"})
    assert resp.status_code == 401


def test_get_daily_record_creates_empty_slot(client, auth_headers, db):
    resp = client.get("/api/dailyrecords", params={"date": "2025-11-30"}, headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["date"] == "2025-11-30"
    assert body["tasks"] == []
    assert body["total_tasks"] == 0
    assert body["locked"] is True
    assert db.query(DailyRecord).count() == 1


def test_get_daily_record_requires_date(client, auth_headers):
    resp = client.get("/api/dailyrecords", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Date required"


def test_add_task_requires_date_and_title(client, auth_headers):
    resp = client.post("/api/dailyrecords/addTask", json={"date": "2025-11-30"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Date and title required"


def test_full_task_lifecycle_and_stats(client, auth_headers):
    record = _add(client, auth_headers, title="Deep work", difficulty="Hard")
    task_id = record["tasks"][0]["id"]
    assert record["tasks"][0]["difficulty"] == "Hard"

    resp = client.patch(
        "/api/dailyrecords/updateTask",
        json={"date": "2025-11-30", "taskId": task_id, "completed": True},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["points_earned"] == 20
    assert resp.json()["completion_rate"] == 100

    tasks = client.get("/api/dailyrecords/getTasks", params={"date": "2025-11-30"}, headers=auth_headers)
    assert tasks.json()[0]["completed"] is True

    stats = client.get("/api/stats", headers=auth_headers).json()
    assert stats["username"] == "apiuser"
    assert stats["total_points"] == 20
    assert stats["total_tasks_completed"] == 1
    assert stats["total_tasks_started"] == 1
    assert stats["tasks_missed"] == 0
    assert stats["current_streak"] == 0
    [(key, count)] = stats["calendar_heatmap_data"].items()
    assert count == 1
    assert datetime.fromtimestamp(int(key)).date() == date(2025, 11, 30)
    first_task = next(b for b in stats["badges"] if b["key"] == "first_task")
    assert first_task["earned"] is True
    assert first_task["earned_on"] == "2025-11-30"


def test_get_tasks_for_unvisited_date_is_empty_and_creates_nothing(client, auth_headers, db):
    resp = client.get("/api/dailyrecords/getTasks", params={"date": "2025-10-01"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == []
    assert db.query(DailyRecord).count() == 0


def test_update_unknown_task_is_404(client, auth_headers):
    _add(client, auth_headers)
    resp = client.patch(
        "/api/dailyrecords/updateTask",
        json={"date": "2025-11-30", "taskId": "missing", "completed": True},
        headers=auth_headers,
    )
    assert resp.status_code == 404


def test_delete_lock_rules(client, auth_headers):
    today_task = _add(client, auth_headers, date="2025-11-30")["tasks"][0]["id"]
    past_task = _add(client, auth_headers, date="2025-11-29")["tasks"][0]["id"]
    tomorrow_task = _add(client, auth_headers, date="2025-12-01")["tasks"][0]["id"]

    def delete(day, task_id):
        return client.request(
            "DELETE",
            "/api/dailyrecords/deleteTask",
            json={"date": day, "taskId": task_id},
            headers=auth_headers,
        )

    assert delete("2025-11-30", today_task).status_code == 403
    assert delete("2025-11-29", past_task).status_code == 403

    resp = delete("2025-12-01", tomorrow_task)
    assert resp.status_code == 200
    assert resp.json()["msg"] == "Task deleted successfully"
    assert resp.json()["tasks"] == []

    stats = client.get("/api/stats", headers=auth_headers).json()
    assert stats["total_tasks_started"] == 2
    assert stats["tasks_missed"] == 2


def test_first_request_of_the_day_rolls_streak_over(client, auth_headers, clock, db):
    record = _add(client, auth_headers)
    client.patch(
        "/api/dailyrecords/updateTask",
        json={"date": "2025-11-30", "taskId": record["tasks"][0]["id"], "completed": True},
        headers=auth_headers,
    )

    clock.set(2025, 12, 1, hour=8)
    stats = client.get("/api/stats", headers=auth_headers).json()
    assert stats["current_streak"] == 1
    assert stats["highest_streak"] == 1

    # Same day again: no second increment.
    stats = client.get("/api/stats", headers=auth_headers).json()
    assert stats["current_streak"] == 1

    user = db.query(User).filter(User.username == "apiuser").one()
    assert user.last_rollover_date == "2025-12-01"


def test_get_all_tasks_lists_every_record(client, auth_headers):
    _add(client, auth_headers, date="2025-11-29")
    _add(client, auth_headers, date="2025-11-30")

    resp = client.get("/api/dailyrecords/getAllTasks", headers=auth_headers)
    assert [r["date"] for r in resp.json()] == ["2025-11-29", "2025-11-30"]


def test_delete_account_cascades(client, auth_headers, db):
    _add(client, auth_headers)
    resp = client.delete("/auth/me", headers=auth_headers)
    assert resp.status_code == 200

    assert db.query(User).count() == 0
    assert db.query(DailyRecord).count() == 0
    assert client.get("/api/stats", headers=auth_headers).status_code == 401
