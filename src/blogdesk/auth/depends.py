from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Cookie, Depends  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from blogdesk.auth.exceptions import (
    AuthServiceAuthenticationException,
    AuthServiceForbiddenException,
)
from blogdesk.auth.models import User
from blogdesk.auth.service import AuthService
from blogdesk.auth.throttle import LoginThrottle
from blogdesk.commons.depends import database_session
from blogdesk.core.settings import settings


@lru_cache
def get_auth_service() -> AuthService:
    return AuthService.create()


@lru_cache
def get_login_throttle() -> LoginThrottle:
    return LoginThrottle(
        max_attempts=int(settings.AUTH_LOGIN_MAX_ATTEMPTS),
        window_s=float(settings.AUTH_LOGIN_WINDOW_S),
    )


async def current_user_optional(
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    token: str | None = Cookie(default=None, alias=settings.AUTH_COOKIE_NAME),
) -> User | None:
    if not token:
        return None
    return await svc.validate(session, token=token)


async def current_user_required(
    user: Annotated[User | None, Depends(current_user_optional)],
) -> User:
    if user is None:
        raise AuthServiceAuthenticationException("unauthorized", "Not authenticated")
    return user


def require_permission(action: str) -> Callable[..., Awaitable[User]]:
    async def _dep(
        user: Annotated[User, Depends(current_user_required)],
        svc: Annotated[AuthService, Depends(get_auth_service)],
    ) -> User:
        if not svc.has_permission(user, action):
            raise AuthServiceForbiddenException("forbidden", f"Missing permission: {action}")
        return user

    return _dep
