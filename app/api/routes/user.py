from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from app.api.routes.auth import CurrentUserDep
from app.db.session import get_session
from app.models.base import utcnow
from app.models.user import User
from app.schemas.user import UserRead, UserResponse, UserUpdate

router = APIRouter(prefix="/user", tags=["user"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.get("/profile", response_model=UserResponse)
def get_profile(current_user: CurrentUserDep) -> UserResponse:
    return UserResponse(user=UserRead.model_validate(current_user))


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: UserUpdate,
    current_user: CurrentUserDep,
    session: SessionDep,
) -> UserResponse:
    user = current_user

    if payload.email is not None:
        normalized_email = payload.email.lower()
        statement = select(User).where(
            func.lower(User.email) == normalized_email,
            User.id != user.id,
        )
        if session.exec(statement).first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )
        user.email = normalized_email
    if payload.name is not None:
        user.name = payload.name

    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)

    return UserResponse(user=UserRead.model_validate(user))
