from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings, settings

# NOTE: bcrypt backend has compatibility issues in this runtime.
# pbkdf2_sha256 is stable and supported directly by passlib.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

REFRESH_TOKEN_BYTES = 40


class InvalidCredentialError(ValueError):
    """Missing, malformed, expired or unmatched access/refresh token."""


def hash_password(password: str) -> str:
    """
    Hash plain password using passlib context.
    """
    if not isinstance(password, str) or not password:
        raise ValueError("Password must be a non-empty string")
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify plain password against stored hash.
    """
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    *,
    expires_minutes: int | None = None,
    config: Settings | None = None,
) -> str:
    """
    Create a signed access token carrying only the user id.

    The token is verified statelessly by `decode_access_token`; nothing is
    written to storage.
    """
    config = config or settings
    if expires_minutes is None:
        expires_minutes = config.ACCESS_TOKEN_MINUTES

    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=int(expires_minutes))
    payload: dict[str, Any] = {
        "userId": user_id,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALG)


def decode_access_token(token: str | None, *, config: Settings | None = None) -> int:
    """
    Decode and validate an access token.
    Returns the embedded user id.

    Raises InvalidCredentialError on a missing, tampered or expired token.
    """
    config = config or settings
    if not token:
        raise InvalidCredentialError("Token is required")

    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALG])
    except JWTError as e:
        raise InvalidCredentialError("Invalid or expired token") from e

    user_id = payload.get("userId")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise InvalidCredentialError("Token subject is missing")
    return user_id


def generate_refresh_token() -> str:
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def hash_refresh_token(token: str, *, config: Settings | None = None) -> str:
    if not token:
        raise ValueError("Refresh token is required")
    config = config or settings
    digest = hmac.new(
        config.REFRESH_TOKEN_SECRET.encode("utf-8"),
        token.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return digest
