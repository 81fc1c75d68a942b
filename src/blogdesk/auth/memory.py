"""
In-memory user repository and session store.

Same contracts as the SQL implementations, with process lifetime only. Used by
the test-suite and handy for local runs without Postgres. The `session`
argument every method takes is ignored.
"""

from __future__ import annotations

import asyncio
import datetime as dt
from dataclasses import dataclass, field
from typing import Any

from blogdesk.auth.crypto import hash_session_token, new_session_token
from blogdesk.auth.exceptions import EmailAlreadyRegistered
from blogdesk.auth.models import User
from blogdesk.auth.repository import normalize_email
from blogdesk.commons.clock import Clock, utcnow


class InMemoryUserRepository:
    def __init__(self, clock: Clock = utcnow) -> None:
        self.clock = clock
        self._users: dict[int, User] = {}
        self._by_email: dict[str, int] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def insert_user(
        self,
        session: Any,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
    ) -> User:
        normalized = normalize_email(email)
        # Check-and-insert is one critical section, mirroring a unique index.
        async with self._lock:
            if normalized in self._by_email:
                raise EmailAlreadyRegistered(normalized)
            user = User(
                id=self._next_id,
                email=normalized,
                name=name.strip(),
                password_hash=password_hash,
                role=role,
                created_at=self.clock(),
                last_login_at=None,
            )
            self._next_id += 1
            self._users[user.id] = user
            self._by_email[normalized] = user.id
            return user

    async def get_user_by_email(self, session: Any, *, email: str) -> User | None:
        user_id = self._by_email.get(normalize_email(email))
        return self._users.get(user_id) if user_id is not None else None

    async def get_user_by_id(self, session: Any, *, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def update_password(
        self, session: Any, *, user_id: int, password_hash: str
    ) -> bool:
        user = self._users.get(user_id)
        if user is None:
            return False
        user.password_hash = password_hash
        return True

    async def touch_last_login(
        self, session: Any, *, user_id: int, at: dt.datetime
    ) -> None:
        user = self._users.get(user_id)
        if user is not None:
            user.last_login_at = at

    def __len__(self) -> int:
        return len(self._users)


@dataclass
class _Entry:
    user_id: int
    created_at: dt.datetime
    expires_at: dt.datetime
    ip: str | None = None
    user_agent: str | None = None


@dataclass
class InMemorySessionStore:
    clock: Clock = field(default=utcnow)
    _entries: dict[str, _Entry] = field(default_factory=dict, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def create(
        self,
        session: Any,
        *,
        user_id: int,
        ttl: dt.timedelta,
        ip: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        token = new_session_token()
        now = self.clock()
        async with self._lock:
            self._entries[hash_session_token(token)] = _Entry(
                user_id=user_id,
                created_at=now,
                expires_at=now + ttl,
                ip=ip,
                user_agent=user_agent,
            )
        return token

    async def get(self, session: Any, *, token: str) -> int | None:
        key = hash_session_token(token)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.user_id

    async def refresh(self, session: Any, *, token: str, ttl: dt.timedelta) -> bool:
        key = hash_session_token(token)
        async with self._lock:
            entry = self._entries.get(key)
            now = self.clock()
            if entry is None or now >= entry.expires_at:
                return False
            entry.expires_at = now + ttl
            return True

    async def delete(self, session: Any, *, token: str) -> bool:
        async with self._lock:
            return self._entries.pop(hash_session_token(token), None) is not None

    async def delete_for_user(
        self, session: Any, *, user_id: int, keep_token: str | None = None
    ) -> int:
        keep = hash_session_token(keep_token) if keep_token is not None else None
        async with self._lock:
            doomed = [
                k
                for k, e in self._entries.items()
                if e.user_id == user_id and k != keep
            ]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    async def purge_expired(self, session: Any) -> int:
        now = self.clock()
        async with self._lock:
            doomed = [k for k, e in self._entries.items() if now >= e.expires_at]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def metadata_for(self, token: str) -> dict[str, Any] | None:
        entry = self._entries.get(hash_session_token(token))
        if entry is None:
            return None
        return {
            "user_id": entry.user_id,
            "created_at": entry.created_at,
            "expires_at": entry.expires_at,
            "ip": entry.ip,
            "user_agent": entry.user_agent,
        }

    def __len__(self) -> int:
        return len(self._entries)
