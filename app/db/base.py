from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import DATABASE_URL


def _make_engine(url: str):
    if url.startswith("sqlite"):
        # Sync routes run in FastAPI's threadpool, so connections cross threads
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    # Server databases drop idle connections; check before handing one out
    return create_engine(url, pool_pre_ping=True, future=True)


engine = _make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def describe_database() -> str:
    """One-line summary of the configured backend, password hidden."""
    backend = engine.url.get_backend_name()
    summary = f"backend={backend} url={engine.url.render_as_string(hide_password=True)}"
    if backend == "sqlite":
        db_path = Path(engine.url.database or "").resolve()
        summary += f" path={db_path} exists={db_path.exists()}"
    return summary


try:
    print(f"[DB] Using database {describe_database()}", flush=True)
except Exception as exc:
    # Never crash app on logging
    print("[DB] Failed to log DB diagnostics:", repr(exc), flush=True)
