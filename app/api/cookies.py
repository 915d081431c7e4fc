from __future__ import annotations

from fastapi import Response

from app.core.config import Settings, settings

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# Paths older clients may have scoped the refresh cookie to.
LEGACY_REFRESH_COOKIE_PATHS = ("/api/auth", "/auth")


def set_auth_cookies(
    response: Response,
    access_token: str,
    refresh_token: str,
    *,
    config: Settings | None = None,
) -> None:
    config = config or settings
    secure = config.is_production

    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=int(config.ACCESS_TOKEN_MINUTES) * 60,
        httponly=True,
        secure=secure,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        max_age=int(config.REFRESH_TOKEN_DAYS) * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)
    for path in LEGACY_REFRESH_COOKIE_PATHS:
        response.delete_cookie(REFRESH_TOKEN_COOKIE, path=path)
