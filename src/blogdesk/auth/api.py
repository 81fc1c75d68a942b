from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Request  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]
from starlette import status  # type: ignore[import-not-found]

from blogdesk.auth.depends import (
    current_user_required,
    get_auth_service,
    get_login_throttle,
    require_permission,
)
from blogdesk.auth.exceptions import (
    AuthServiceAuthenticationException,
    AuthServiceRateLimitedException,
)
from blogdesk.auth.models import User
from blogdesk.auth.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    OkResponse,
    RegisterRequest,
    UserPublic,
)
from blogdesk.auth.service import AuthService
from blogdesk.auth.throttle import LoginThrottle
from blogdesk.commons.depends import database_session
from blogdesk.commons.logging import logger
from blogdesk.core.settings import settings

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(resp: JSONResponse, token: str) -> None:
    resp.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=bool(settings.AUTH_COOKIE_SECURE),
        samesite=str(settings.AUTH_COOKIE_SAMESITE),
        path="/",
        max_age=int(settings.AUTH_SESSION_TTL_DAYS) * 24 * 60 * 60,
    )


def _clear_session_cookie(resp: JSONResponse) -> None:
    resp.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
    )


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    throttle: Annotated[LoginThrottle, Depends(get_login_throttle)],
) -> JSONResponse:
    ip = _client_ip(request)
    key = ip or req.email.strip().lower()
    allowed, retry_after = throttle.hit(key)
    if not allowed:
        logger.warning("Login throttled: key=%s", key)
        raise AuthServiceRateLimitedException(
            "too_many_attempts",
            "Too many login attempts, try again later",
            retry_after_s=math.ceil(retry_after),
        )

    user, token = await svc.login(
        session,
        email=req.email,
        password=req.password,
        ip=ip,
        user_agent=request.headers.get("user-agent"),
    )

    data = AuthResponse(user=user).model_dump(mode="json")
    resp = JSONResponse(status_code=status.HTTP_200_OK, content=data)
    _set_session_cookie(resp, token)
    return resp


@router.post("/logout", response_model=OkResponse)
async def logout(
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        await svc.logout(session, token=token)
    resp = JSONResponse(status_code=status.HTTP_200_OK, content={"ok": True})
    _clear_session_cookie(resp)
    return resp


@router.get("/me", response_model=AuthResponse)
async def me(
    user: Annotated[User, Depends(current_user_required)],
) -> AuthResponse:
    return AuthResponse(user=UserPublic.model_validate(user))


@router.post("/refresh", response_model=OkResponse)
async def refresh(
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token or not await svc.refresh(session, token=token):
        raise AuthServiceAuthenticationException("unauthorized", "Not authenticated")
    resp = JSONResponse(status_code=status.HTTP_200_OK, content={"ok": True})
    # Re-issue so the browser-side expiry follows the server-side one.
    _set_session_cookie(resp, token)
    return resp


@router.post("/password", response_model=OkResponse)
async def change_password(
    req: ChangePasswordRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    user: Annotated[User, Depends(current_user_required)],
) -> OkResponse:
    await svc.change_password(
        session,
        user_id=user.id,
        old_password=req.old_password,
        new_password=req.new_password,
        current_token=request.cookies.get(settings.AUTH_COOKIE_NAME),
    )
    return OkResponse()


@router.post("/users", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    admin: Annotated[User, Depends(require_permission("manage_users"))],
) -> AuthResponse:
    user = await svc.register(
        session, email=req.email, password=req.password, name=req.name, role=req.role
    )
    logger.info("User %s created by admin %s", user.id, admin.id)
    return AuthResponse(user=UserPublic.model_validate(user))
