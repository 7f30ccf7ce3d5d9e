import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# Point the app at a throwaway SQLite file before app.db.base builds its engine.
_TMP_DIR = tempfile.mkdtemp(prefix="taskstreak-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TMP_DIR) / 'test.db'}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.auth.models import User  # noqa: E402
from app.core import dates  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.db.base import Base, SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


class Clock:
    """Controls what app.core.dates considers "now"."""

    def __init__(self, monkeypatch):
        self._monkeypatch = monkeypatch
        self.now = None

    def set(self, year, month, day, hour=9, minute=0):
        self.now = datetime(year, month, day, hour, minute)
        self._monkeypatch.setattr(dates, "local_now", lambda: self.now)


@pytest.fixture(autouse=True)
def clock(monkeypatch):
    c = Clock(monkeypatch)
    c.set(2025, 11, 30)
    return c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(username="alice", **fields):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password("password123"),
            total_points=0,
            total_tasks_completed=0,
            total_tasks_created=0,
            current_streak=0,
            highest_streak=0,
            daily_completion_summary={},
        )
        for name, value in fields.items():
            setattr(user, name, value)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    """Sign up and log in a fresh user through the API."""
    signup = client.post(
        "/auth/signup",
        data={"email": "api@example.com", "username": "apiuser", "password": "password123"},
    )
    assert signup.status_code == 201
    login = client.post(
        "/auth/login",
        data={"email_or_username": "apiuser", "password": "password123"},
    )
    assert login.status_code == 200
    return {"Authorization": f"Bearer {login.json()['access_token']}"}
