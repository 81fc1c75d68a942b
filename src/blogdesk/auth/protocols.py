"""
Storage contracts the auth service depends on.

Two implementations exist for each: SQLAlchemy-backed (`repository.py`,
`sessions.py`) and in-memory (`memory.py`). Every method takes the
request-scoped database session first; in-memory implementations ignore it.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Protocol

from blogdesk.auth.models import User


class UserRepositoryProtocol(Protocol):
    async def insert_user(
        self,
        session: Any,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
    ) -> User:
        """Insert a user; raise `EmailAlreadyRegistered` on duplicate email."""
        ...

    async def get_user_by_email(self, session: Any, *, email: str) -> User | None: ...

    async def get_user_by_id(self, session: Any, *, user_id: int) -> User | None: ...

    async def update_password(
        self, session: Any, *, user_id: int, password_hash: str
    ) -> bool: ...

    async def touch_last_login(
        self, session: Any, *, user_id: int, at: dt.datetime
    ) -> None: ...


class SessionStoreProtocol(Protocol):
    async def create(
        self,
        session: Any,
        *,
        user_id: int,
        ttl: dt.timedelta,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> str: ...

    async def get(self, session: Any, *, token: str) -> int | None: ...

    async def refresh(self, session: Any, *, token: str, ttl: dt.timedelta) -> bool: ...

    async def delete(self, session: Any, *, token: str) -> bool: ...

    async def delete_for_user(
        self, session: Any, *, user_id: int, keep_token: str | None = None
    ) -> int: ...

    async def purge_expired(self, session: Any) -> int: ...
