from datetime import datetime

from pydantic import Field

from app.models.task import TaskPriority, TaskStatus
from app.schemas.camel_model import CamelModel


class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class TaskUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class TaskRead(CamelModel):
    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    user_id: int

    created_at: datetime
    updated_at: datetime


class TaskResponse(CamelModel):
    task: TaskRead


class TaskListResponse(CamelModel):
    tasks: list[TaskRead]
