from datetime import datetime

from pydantic import Field

from app.schemas.camel_model import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(CamelModel):
    name: str = Field(min_length=2, max_length=255)
    email: str = Field(min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=255)


class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    email: str | None = Field(default=None, min_length=5, max_length=255, pattern=EMAIL_PATTERN)


class UserRead(CamelModel):
    id: int
    name: str
    email: str

    created_at: datetime
    updated_at: datetime


class UserLogin(CamelModel):
    email: str = Field(min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=255)


class UserResponse(CamelModel):
    user: UserRead


class MessageResponse(CamelModel):
    message: str
