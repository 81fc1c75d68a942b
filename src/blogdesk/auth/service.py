from __future__ import annotations

import asyncio
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Optional

from blogdesk.auth import permissions
from blogdesk.auth.crypto import DEFAULT_ITERATIONS, hash_password, verify_password
from blogdesk.auth.exceptions import (
    INVALID_CREDENTIALS,
    INVALID_CREDENTIALS_DETAILS,
    AuthServiceAuthenticationException,
    AuthServiceConflictException,
    AuthServiceNotFoundException,
    AuthServiceValidationException,
    EmailAlreadyRegistered,
)
from blogdesk.auth.models import DEFAULT_ROLE, ROLES, User
from blogdesk.auth.protocols import SessionStoreProtocol, UserRepositoryProtocol
from blogdesk.auth.repository import UserRepository
from blogdesk.auth.schemas import UserPublic
from blogdesk.auth.sessions import SessionStore
from blogdesk.auth.validation import email_violations, password_violations
from blogdesk.commons.clock import Clock, utcnow
from blogdesk.commons.logging import logger
from blogdesk.core.settings import settings

EMAIL_TAKEN = "email_taken"
EMAIL_TAKEN_DETAILS = "A user with this email already exists"


@dataclass
class AuthService:
    """
    Registration, login, session validation and password changes.

    The service owns the transaction: repositories only flush, the service
    commits once an operation has fully succeeded. Storage failures are not
    caught here; they propagate and the request-scoped session rolls back.
    """

    users: UserRepositoryProtocol
    sessions: SessionStoreProtocol
    clock: Clock = field(default=utcnow)
    session_ttl: dt.timedelta = dt.timedelta(days=7)
    password_iterations: int = DEFAULT_ITERATIONS
    revoke_sessions_on_password_change: bool = False
    _dummy_hash: str = field(init=False, repr=False)

    @classmethod
    def create(cls) -> "AuthService":
        return cls(
            users=UserRepository(),
            sessions=SessionStore(),
            session_ttl=dt.timedelta(days=int(settings.AUTH_SESSION_TTL_DAYS)),
            password_iterations=int(settings.AUTH_PASSWORD_ITERATIONS),
            revoke_sessions_on_password_change=bool(
                settings.AUTH_REVOKE_SESSIONS_ON_PASSWORD_CHANGE
            ),
        )

    def __post_init__(self) -> None:
        # Verified against when the email is unknown, so both login failure
        # paths pay for exactly one key derivation.
        self._dummy_hash = hash_password("dummy-password", iterations=self.password_iterations)

    async def register(
        self,
        session: Any,
        *,
        email: str,
        password: str,
        name: str,
        role: str | None = None,
    ) -> User:
        role = role or DEFAULT_ROLE
        errors = email_violations(email) + password_violations(password)
        if role not in ROLES:
            errors.append(f"Unknown role: {role}")
        if errors:
            raise AuthServiceValidationException(
                "validation_failed", "; ".join(errors), errors=errors
            )

        # Fast path only; the repository's unique constraint is authoritative.
        if await self.users.get_user_by_email(session, email=email) is not None:
            raise AuthServiceConflictException(EMAIL_TAKEN, EMAIL_TAKEN_DETAILS)

        pw_hash = await asyncio.to_thread(
            hash_password, password, iterations=self.password_iterations
        )
        try:
            user = await self.users.insert_user(
                session, email=email, name=name, password_hash=pw_hash, role=role
            )
        except EmailAlreadyRegistered as exc:
            await session.rollback()
            raise AuthServiceConflictException(EMAIL_TAKEN, EMAIL_TAKEN_DETAILS) from exc
        await session.commit()
        logger.info("User registered: id=%s role=%s", user.id, user.role)
        return user

    async def login(
        self,
        session: Any,
        *,
        email: str,
        password: str,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[UserPublic, str]:
        user = await self.users.get_user_by_email(session, email=email)
        encoded = user.password_hash if user is not None else self._dummy_hash
        password_ok = await asyncio.to_thread(verify_password, password, encoded)
        if user is None or not password_ok:
            # Same error either way: callers must not learn which factor failed.
            logger.warning("Login failed: ip=%s", ip)
            raise AuthServiceAuthenticationException(
                INVALID_CREDENTIALS, INVALID_CREDENTIALS_DETAILS
            )

        await self.users.touch_last_login(session, user_id=user.id, at=self.clock())
        token = await self.sessions.create(
            session,
            user_id=user.id,
            ttl=self.session_ttl,
            ip=ip,
            user_agent=user_agent,
        )
        await session.commit()
        logger.info("Login succeeded: user_id=%s", user.id)
        return UserPublic.model_validate(user), token

    async def logout(self, session: Any, *, token: str) -> None:
        await self.sessions.delete(session, token=token)
        await session.commit()

    async def validate(self, session: Any, *, token: str) -> Optional[User]:
        user_id = await self.sessions.get(session, token=token)
        # Persist a reaped session even when validation fails.
        await session.commit()
        if user_id is None:
            return None
        return await self.users.get_user_by_id(session, user_id=user_id)

    async def refresh(self, session: Any, *, token: str) -> bool:
        refreshed = await self.sessions.refresh(session, token=token, ttl=self.session_ttl)
        await session.commit()
        return refreshed

    async def change_password(
        self,
        session: Any,
        *,
        user_id: int,
        old_password: str,
        new_password: str,
        current_token: str | None = None,
    ) -> None:
        user = await self.users.get_user_by_id(session, user_id=user_id)
        if user is None:
            raise AuthServiceNotFoundException("user_not_found", "User not found")

        if not await asyncio.to_thread(verify_password, old_password, user.password_hash):
            raise AuthServiceAuthenticationException(
                INVALID_CREDENTIALS, "Current password is incorrect"
            )

        errors = password_violations(new_password)
        if errors:
            raise AuthServiceValidationException(
                "validation_failed", "; ".join(errors), errors=errors
            )

        pw_hash = await asyncio.to_thread(
            hash_password, new_password, iterations=self.password_iterations
        )
        await self.users.update_password(session, user_id=user_id, password_hash=pw_hash)
        if self.revoke_sessions_on_password_change:
            revoked = await self.sessions.delete_for_user(
                session, user_id=user_id, keep_token=current_token
            )
            logger.info("Revoked %s session(s) after password change: user_id=%s", revoked, user_id)
        await session.commit()
        logger.info("Password changed: user_id=%s", user_id)

    async def purge_expired_sessions(self, session: Any) -> int:
        purged = await self.sessions.purge_expired(session)
        await session.commit()
        logger.info("Purged %s expired session(s)", purged)
        return purged

    def has_permission(self, user: Any, action: str) -> bool:
        return permissions.has_permission(user, action)
