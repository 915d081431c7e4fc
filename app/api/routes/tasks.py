from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlmodel import Session, col, select

from app.api.routes.auth import CurrentUserDep
from app.db.session import get_session
from app.models.base import utcnow
from app.models.task import Task, TaskPriority, TaskStatus
from app.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)
from app.schemas.user import MessageResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])

SessionDep = Annotated[Session, Depends(get_session)]


def _require_user_id(current_user: CurrentUserDep) -> int:
    user_id = current_user.id
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="User record is invalid",
        )
    return user_id


UserIdDep = Annotated[int, Depends(_require_user_id)]


def _task_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Task not found",
    )


def _get_owned_task(session: Session, task_id: int, user_id: int) -> Task:
    statement = select(Task).where(Task.id == task_id, Task.user_id == user_id)
    task = session.exec(statement).first()
    if task is None:
        raise _task_not_found()
    return task


@router.get("", response_model=TaskListResponse)
def list_tasks(
    session: SessionDep,
    user_id: UserIdDep,
    search: Annotated[str | None, Query(max_length=255)] = None,
    task_status: Annotated[TaskStatus | None, Query(alias="status")] = None,
    priority: Annotated[TaskPriority | None, Query()] = None,
) -> TaskListResponse:
    statement = select(Task).where(Task.user_id == user_id)
    if task_status is not None:
        statement = statement.where(Task.status == task_status)
    if priority is not None:
        statement = statement.where(Task.priority == priority)

    normalized_search = search.strip() if search else ""
    if normalized_search:
        pattern = f"%{normalized_search}%"
        statement = statement.where(
            or_(
                col(Task.title).ilike(pattern),
                col(Task.description).ilike(pattern),
            )
        )

    statement = statement.order_by(col(Task.created_at).desc(), col(Task.id).desc())
    tasks = session.exec(statement).all()
    return TaskListResponse(tasks=[TaskRead.model_validate(task) for task in tasks])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskCreate, session: SessionDep, user_id: UserIdDep) -> TaskResponse:
    task = Task(
        title=payload.title,
        description=payload.description,
        status=payload.status or TaskStatus.pending,
        priority=payload.priority or TaskPriority.medium,
        user_id=user_id,
    )
    session.add(task)
    session.commit()
    session.refresh(task)

    return TaskResponse(task=TaskRead.model_validate(task))


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    session: SessionDep,
    user_id: UserIdDep,
) -> TaskResponse:
    task = _get_owned_task(session, task_id, user_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field in ("title", "status", "priority") and value is None:
            continue
        setattr(task, field, value)

    task.updated_at = utcnow()
    session.add(task)
    session.commit()
    session.refresh(task)

    return TaskResponse(task=TaskRead.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: int, session: SessionDep, user_id: UserIdDep) -> MessageResponse:
    task = _get_owned_task(session, task_id, user_id)
    session.delete(task)
    session.commit()

    return MessageResponse(message="Task deleted successfully")
