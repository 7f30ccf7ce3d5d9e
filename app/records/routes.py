"""
Daily record and task endpoints. All of them settle the streak rollover first.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core.deps import get_rolled_over_user
from app.db.session import get_db
from app.records import store
from app.records.schemas import (
    AddTaskRequest, UpdateTaskRequest, DeleteTaskRequest, record_to_dict, task_to_dict,
)
from app.tasks import service

router = APIRouter(prefix="/api/dailyrecords", tags=["dailyrecords"])


# ======================================================
# GET DAILY RECORD (created on first visit)
# ======================================================
@router.get("")
def get_daily_record(
    date: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    record = store.get_or_create_record(db, user.user_id, date)
    return record_to_dict(record)


# ======================================================
# ADD TASK
# ======================================================
@router.post("/addTask")
def add_task(
    data: AddTaskRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    record = service.add_task(
        db, user.user_id, data.date, data.title,
        difficulty=data.difficulty, description=data.description,
    )
    return record_to_dict(record)


# ======================================================
# TASKS FOR ONE DATE (does not create a record)
# ======================================================
@router.get("/getTasks")
def get_tasks(
    date: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    store.require_date(date)
    record = store.find_record(db, user.user_id, date)
    return [task_to_dict(t) for t in record.tasks] if record else []


# ======================================================
# ALL RECORDS (history page)
# ======================================================
@router.get("/getAllTasks")
def get_all_tasks(
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    return [record_to_dict(r) for r in store.list_records(db, user.user_id)]


# ======================================================
# UPDATE TASK COMPLETION
# ======================================================
@router.patch("/updateTask")
def update_task(
    data: UpdateTaskRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    record = service.toggle_completion(db, user.user_id, data.date, data.taskId, data.completed)
    return record_to_dict(record)


# ======================================================
# DELETE TASK (tomorrow's list only)
# ======================================================
@router.delete("/deleteTask")
def delete_task(
    data: DeleteTaskRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_rolled_over_user),
):
    record = service.delete_task(db, user.user_id, data.date, data.taskId)
    payload = record_to_dict(record)
    return {"msg": "Task deleted successfully", "tasks": payload["tasks"], "record": payload}
