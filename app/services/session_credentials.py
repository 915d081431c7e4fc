from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlmodel import Session, col, select

from app.core.config import Settings, settings
from app.core.security import (
    InvalidCredentialError,
    create_access_token,
    generate_refresh_token,
    hash_refresh_token,
)
from app.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionCredentialManager:
    """
    Issues, rotates and revokes the access/refresh token pair of a user.

    Only one refresh token is live per user: issuing a new one deletes every
    earlier record for that user. Raw refresh tokens are handed to the caller
    and never stored; the table keeps their HMAC digest.
    """

    def __init__(self, session: Session, config: Settings | None = None) -> None:
        self.session = session
        self.config = config or settings

    def hash(self, raw_token: str) -> str:
        return hash_refresh_token(raw_token, config=self.config)

    def issue_access_token(self, user_id: int) -> str:
        return create_access_token(user_id, config=self.config)

    def issue_refresh_token(self, user_id: int) -> str:
        raw_token = self._stage_refresh_token(user_id)
        self.session.commit()
        return raw_token

    def rotate(self, raw_token: str | None) -> tuple[str, str]:
        """
        Exchange a live refresh token for a new access/refresh pair.

        Raises InvalidCredentialError when the token is unknown, expired or
        was consumed by a concurrent rotation.
        """
        if not raw_token:
            raise InvalidCredentialError("Refresh token is required")

        digest = self.hash(raw_token)
        statement = select(RefreshToken).where(
            RefreshToken.token_hash == digest,
            RefreshToken.expires_at > _utcnow(),
        )
        record = self.session.exec(statement).first()
        if record is None or record.id is None:
            raise InvalidCredentialError("Invalid or expired refresh token")

        user_id = record.user_id
        record_id = record.id
        self.session.expunge(record)

        # Conditional on the consumed record so two rotations of the same
        # token cannot both succeed.
        result = self.session.connection().execute(
            delete(RefreshToken).where(
                col(RefreshToken.id) == record_id,
                col(RefreshToken.token_hash) == digest,
            )
        )
        if result.rowcount != 1:
            self.session.rollback()
            logger.warning("Refresh token for user %s was already rotated", user_id)
            raise InvalidCredentialError("Invalid or expired refresh token")

        refresh_token = self._stage_refresh_token(user_id)
        access_token = self.issue_access_token(user_id)
        self.session.commit()
        logger.info("Rotated refresh token for user %s", user_id)
        return access_token, refresh_token

    def revoke(self, raw_token: str | None) -> None:
        if not raw_token:
            return
        record = self.session.exec(
            select(RefreshToken).where(RefreshToken.token_hash == self.hash(raw_token))
        ).first()
        if record is None:
            return
        self.session.delete(record)
        self.session.commit()

    def purge_expired(self) -> int:
        """Delete refresh tokens whose expiry has passed. Returns the row count."""
        expired = self.session.exec(
            select(RefreshToken).where(RefreshToken.expires_at <= _utcnow())
        ).all()
        for record in expired:
            self.session.delete(record)
        self.session.commit()
        return len(expired)

    def _stage_refresh_token(self, user_id: int) -> str:
        for existing in self.session.exec(
            select(RefreshToken).where(RefreshToken.user_id == user_id)
        ).all():
            self.session.delete(existing)
        self.session.flush()

        raw_token = generate_refresh_token()
        self.session.add(
            RefreshToken(
                user_id=user_id,
                token_hash=self.hash(raw_token),
                expires_at=_utcnow() + timedelta(days=int(self.config.REFRESH_TOKEN_DAYS)),
            )
        )
        self.session.flush()
        return raw_token
