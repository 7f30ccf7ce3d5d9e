"""
Request bodies and response shapes for the daily record endpoints.

Required fields are Optional here on purpose: the task service validates
them and answers 400 with a readable message instead of pydantic's 422.
"""
from typing import Optional

from pydantic import BaseModel

from app.records.models import DailyRecord, Task


class AddTaskRequest(BaseModel):
    date: Optional[str] = None
    title: Optional[str] = None
    difficulty: Optional[str] = None
    description: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    date: Optional[str] = None
    taskId: Optional[str] = None
    completed: Optional[bool] = None


class DeleteTaskRequest(BaseModel):
    date: Optional[str] = None
    taskId: Optional[str] = None


def task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "difficulty": task.difficulty,
        "completed": bool(task.completed),
    }


def record_to_dict(record: DailyRecord) -> dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "date": record.date,
        "total_tasks": record.total_tasks,
        "completed_tasks": record.completed_tasks,
        "points_earned": record.points_earned,
        "completion_rate": record.completion_rate,
        "locked": bool(record.locked),
        "tasks": [task_to_dict(t) for t in record.tasks],
    }
