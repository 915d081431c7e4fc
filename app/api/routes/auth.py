from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.api.cookies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    clear_auth_cookies,
    set_auth_cookies,
)
from app.core.security import (
    InvalidCredentialError,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.db.session import get_session
from app.models.user import User
from app.schemas.user import (
    MessageResponse,
    UserCreate,
    UserLogin,
    UserRead,
    UserResponse,
)
from app.services.session_credentials import SessionCredentialManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

SessionDep = Annotated[Session, Depends(get_session)]
AccessCookieDep = Annotated[str | None, Cookie(alias=ACCESS_TOKEN_COOKIE)]
RefreshCookieDep = Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)]


def get_credential_manager(session: SessionDep) -> SessionCredentialManager:
    return SessionCredentialManager(session)


CredentialsDep = Annotated[SessionCredentialManager, Depends(get_credential_manager)]


def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_user_by_email(session: Session, email: str) -> User | None:
    normalized_email = email.strip().lower()
    statement = select(User).where(func.lower(User.email) == normalized_email)
    return session.exec(statement).first()


def _start_session(response: Response, credentials: SessionCredentialManager, user: User) -> UserResponse:
    if user.id is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="User record is invalid",
        )

    access_token = credentials.issue_access_token(user.id)
    refresh_token = credentials.issue_refresh_token(user.id)
    set_auth_cookies(response, access_token, refresh_token)
    return UserResponse(user=UserRead.model_validate(user))


def get_current_user(session: SessionDep, access_token: AccessCookieDep = None) -> User:
    if not access_token:
        raise _unauthorized("Authentication required")

    try:
        user_id = decode_access_token(access_token)
    except InvalidCredentialError:
        raise _unauthorized("Invalid or expired token")

    user = session.get(User, user_id)
    if user is None:
        raise _unauthorized("Invalid or expired token")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: UserCreate,
    response: Response,
    session: SessionDep,
    credentials: CredentialsDep,
) -> UserResponse:
    existing_user = _get_user_by_email(session, payload.email)
    if existing_user is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        email=payload.email.lower(),
        name=payload.name,
        password_hash=hash_password(payload.password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Registered user %s", user.id)

    return _start_session(response, credentials, user)


@router.post("/login", response_model=UserResponse)
def login(
    payload: UserLogin,
    response: Response,
    session: SessionDep,
    credentials: CredentialsDep,
) -> UserResponse:
    user = _get_user_by_email(session, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Rejected login attempt")
        raise _unauthorized("Invalid email or password")

    logger.info("User %s logged in", user.id)
    return _start_session(response, credentials, user)


@router.post("/refresh", response_model=MessageResponse)
def refresh(
    response: Response,
    credentials: CredentialsDep,
    refresh_token: RefreshCookieDep = None,
) -> MessageResponse | JSONResponse:
    try:
        access_token, new_refresh_token = credentials.rotate(refresh_token)
    except InvalidCredentialError as e:
        logger.info("Refresh rejected: %s", e)
        rejected = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(e)},
            headers={"WWW-Authenticate": "Bearer"},
        )
        clear_auth_cookies(rejected)
        return rejected

    set_auth_cookies(response, access_token, new_refresh_token)
    return MessageResponse(message="Token refreshed")


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    credentials: CredentialsDep,
    refresh_token: RefreshCookieDep = None,
) -> MessageResponse:
    try:
        credentials.revoke(refresh_token)
    except SQLAlchemyError:
        logger.exception("Failed to revoke refresh token during logout")
        credentials.session.rollback()

    clear_auth_cookies(response)
    return MessageResponse(message="Logged out successfully")
