import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import LOG_LEVEL, CORS_ORIGINS
from app.core.errors import TaskTrackerError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("app")

from app.db.base import Base, engine  # noqa: E402
from app.auth.models import User  # noqa: E402,F401
from app.records.models import DailyRecord, Task  # noqa: E402,F401  Import so create_all picks them up
from app.stats.models import UserBadge  # noqa: E402,F401

from app.auth.routes import router as auth_router  # noqa: E402
from app.records.routes import router as records_router  # noqa: E402
from app.api.routes import router as api_router  # noqa: E402


app = FastAPI(title="TaskStreak", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)


@app.exception_handler(TaskTrackerError)
async def task_tracker_error_handler(request: Request, exc: TaskTrackerError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Include routers
app.include_router(auth_router)
app.include_router(records_router)
app.include_router(api_router)


@app.get("/", tags=["health"])
def health_check():
    return {"status": "ok", "app": "TaskStreak", "msg": "Backend API is running..."}
