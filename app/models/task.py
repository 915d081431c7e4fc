from enum import Enum

from sqlalchemy import Column, Text
from sqlmodel import Field

from app.models.base import BaseTable


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Task(BaseTable, table=True):
    __tablename__: str = "tasks"  # type: ignore[assignment]

    title: str = Field(nullable=False, max_length=255)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    status: TaskStatus = Field(default=TaskStatus.pending, nullable=False, index=True)
    priority: TaskPriority = Field(default=TaskPriority.medium, nullable=False, index=True)
    user_id: int = Field(nullable=False, foreign_key="users.id", ondelete="CASCADE", index=True)
