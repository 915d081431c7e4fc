from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field

from app.models.base import BaseTable


class RefreshToken(BaseTable, table=True):
    __tablename__: str = "refresh_tokens"  # type: ignore[assignment]
    # Without AUTOINCREMENT SQLite hands a freed rowid to the next insert.
    __table_args__ = {"sqlite_autoincrement": True}

    user_id: int = Field(nullable=False, foreign_key="users.id", ondelete="CASCADE", index=True)
    token_hash: str = Field(nullable=False, unique=True, index=True, max_length=64)
    expires_at: datetime = Field(nullable=False, index=True, sa_type=DateTime(timezone=True))
